"""marshal-guard shared domain types.

This module defines the value types consumed by the filter compiler and
decision engine.  All public symbols are re-exported from
``marshal_guard.core``.

Key design decisions:
* Enums use *string* values so decisions serialise cleanly into logs and
  error details.
* :class:`FilterInfo` is a frozen Pydantic model: a decoder builds one per
  decision point and the engine only ever reads it.
"""
from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Status(enum.StrEnum):
    """Outcome of a filter (or of a single rule) for one decision point.

    * **ALLOW** -- the class may be resolved.
    * **REJECT** -- decoding must not continue.
    * **UNDECIDED** -- no opinion; evaluation moves to the next rule.
    """

    ALLOW = "allow"
    REJECT = "reject"
    UNDECIDED = "undecided"


class Polarity(enum.StrEnum):
    """Polarity of a class-match element (``!`` prefix means deny)."""

    ALLOW = "allow"
    DENY = "deny"

    @property
    def match_status(self) -> Status:
        """Return the status produced when an element of this polarity matches."""
        return Status.REJECT if self is Polarity.DENY else Status.ALLOW

    @property
    def marker(self) -> str:
        return "!" if self is Polarity.DENY else ""


class LimitMetric(enum.StrEnum):
    """Structural metrics that a limit element can bound.

    The values are the names accepted on the left of ``=`` in a filter
    specification.
    """

    DEPTH = "maxdepth"
    ARRAY = "maxarray"
    REFERENCES = "maxrefs"
    BYTES = "maxbytes"

    @property
    def field_name(self) -> str:
        """Return the :class:`FilterInfo` attribute this metric reads."""
        return _METRIC_FIELDS[self]


_METRIC_FIELDS: dict[LimitMetric, str] = {
    LimitMetric.DEPTH: "depth",
    LimitMetric.ARRAY: "array_length",
    LimitMetric.REFERENCES: "references",
    LimitMetric.BYTES: "stream_bytes",
}


# ---------------------------------------------------------------------------
# FilterInfo -- the per-decision query
# ---------------------------------------------------------------------------


class FilterInfo(BaseModel):
    """Snapshot of the decoder state at one decision point.

    Attributes
    ----------
    class_name:
        Fully qualified name of the class being resolved, or ``None`` when
        no class is known yet (primitives, ``void``, array bases, or a
        pure limit check).
    depth:
        Current nesting depth of the object graph.
    array_length:
        Length of the array being read, or ``None`` when the current node
        is not an array.
    references:
        Number of distinct object references seen so far in the stream.
    stream_bytes:
        Number of bytes consumed so far from the stream.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    class_name: str | None = Field(
        default=None,
        description="Resolved class name, or None when not yet known.",
    )
    depth: int = Field(default=0, ge=0, description="Current graph depth.")
    array_length: int | None = Field(
        default=None,
        ge=0,
        description="Array length when the current node is an array.",
    )
    references: int = Field(
        default=0,
        ge=0,
        description="Distinct object references seen so far.",
    )
    stream_bytes: int = Field(
        default=0,
        ge=0,
        description="Bytes consumed so far from the stream.",
    )

    @classmethod
    def for_type(cls, type_: type, **fields: Any) -> FilterInfo:
        """Build a query for a Python class, named ``module.qualname``."""
        return cls(class_name=qualified_name(type_), **fields)

    @property
    def match_name(self) -> str:
        """Return the name used for class matching (``""`` when absent)."""
        return class_name_for(self)

    def metric(self, metric: LimitMetric) -> int:
        """Return the current value of *metric*."""
        return metric_value(self, metric)


# ---------------------------------------------------------------------------
# Accessors shared with duck-typed query objects
# ---------------------------------------------------------------------------


def qualified_name(type_: type) -> str:
    """Return the dotted ``module.qualname`` of *type_*."""
    return f"{type_.__module__}.{type_.__qualname__}"


def class_name_for(info: Any) -> str:
    """Return the class name of *info* for matching, ``""`` when absent."""
    name = info.class_name
    if name is None:
        return ""
    return name


def metric_value(info: Any, metric: LimitMetric) -> int:
    """Return the value of *metric* on *info*.

    A missing array length reads as ``-1`` so it never exceeds a
    (non-negative) threshold.
    """
    value = getattr(info, metric.field_name)
    if value is None:
        return -1
    return value
