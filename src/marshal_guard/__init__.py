"""marshal-guard -- unmarshalling input filters for untrusted object streams.

A filter specification such as::

    maxdepth=20;maxbytes=1048576;!com.example.Gadget;com.example.**

is compiled once into an ordered chain of rules.  A decoder then asks the
filter about every class it resolves and every structural step it takes,
and gets back ALLOW, REJECT or UNDECIDED.

Packages
--------
* :mod:`marshal_guard.core` -- types, errors, configuration, interfaces.
* :mod:`marshal_guard.filter` -- compiler, engine and guard.
"""
from __future__ import annotations

__version__ = "1.0.0a1"

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
from marshal_guard.filter import (
    FilterChain,
    FilterDecision,
    FilterGuard,
    SpecFilter,
    compile_spec,
    create_filter,
    evaluate,
)

__all__ = [
    "ClassRejected",
    "FilterChain",
    "FilterConfig",
    "FilterDecision",
    "FilterError",
    "FilterGuard",
    "FilterInfo",
    "FilterInfoSource",
    "InputFilter",
    "InvalidSpecification",
    "LimitExceeded",
    "LimitMetric",
    "MarshalGuardError",
    "Polarity",
    "SpecFilter",
    "SpecificationError",
    "Status",
    "UndecidedRejected",
    "__version__",
    "compile_spec",
    "create_filter",
    "evaluate",
]
