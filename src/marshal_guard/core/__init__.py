"""marshal-guard core -- shared types, errors, configuration and interfaces."""
from __future__ import annotations

from marshal_guard.core.config import FilterConfig
from marshal_guard.core.errors import (
    ClassRejected,
    FilterError,
    InvalidSpecification,
    LimitExceeded,
    MarshalGuardError,
    SpecificationError,
    UndecidedRejected,
)
from marshal_guard.core.interfaces import FilterInfoSource, InputFilter
from marshal_guard.core.types import FilterInfo, LimitMetric, Polarity, Status

__all__ = [
    "ClassRejected",
    "FilterConfig",
    "FilterError",
    "FilterInfo",
    "FilterInfoSource",
    "InputFilter",
    "InvalidSpecification",
    "LimitExceeded",
    "LimitMetric",
    "MarshalGuardError",
    "Polarity",
    "SpecificationError",
    "Status",
    "UndecidedRejected",
]
