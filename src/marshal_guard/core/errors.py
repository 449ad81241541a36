"""marshal-guard error-code hierarchy.

Hierarchy
---------
::

    MarshalGuardError
    +-- SpecificationError    (MG-E1xx)
    |   +-- InvalidSpecification
    +-- FilterError           (MG-E2xx)
        +-- ClassRejected
        +-- LimitExceeded
        +-- UndecidedRejected

:class:`InvalidSpecification` is the only error raised by the compiler and
it is raised at construction time only; evaluating a compiled chain never
fails.  :class:`FilterError` subclasses are raised by
:class:`~marshal_guard.filter.guard.FilterGuard` on behalf of a decoder.

Usage
-----
Catch by category::

    try:
        guard.check_or_raise(info)
    except FilterError:
        # handles ClassRejected, LimitExceeded, UndecidedRejected
        ...
"""
from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class MarshalGuardError(Exception):
    """Base exception for all marshal-guard errors.

    Attributes
    ----------
    code : str
        Error code, e.g. ``"MG-E100"``.
    message : str
        Human-readable description.
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    resolution : str
        Suggested action for the caller.
    """

    code: str = "MG-E000"
    message: str = "Unknown marshal-guard error"
    resolution: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        if resolution is not None:
            self.resolution = resolution
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error into a plain mapping for logs and reports."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["detail"] = self.details
        if self.resolution:
            payload["resolution"] = self.resolution
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ===================================================================
# Category base classes
# ===================================================================


class SpecificationError(MarshalGuardError):
    """MG-E1xx -- Errors in a filter specification string."""

    code = "MG-E1XX"


class FilterError(MarshalGuardError):
    """MG-E2xx -- A decision point was refused by the filter."""

    code = "MG-E2XX"


# ===================================================================
# MG-E1xx  Specification Errors
# ===================================================================


class InvalidSpecification(SpecificationError):
    """MG-E100 -- The filter specification violates the grammar."""

    code = "MG-E100"
    message = "Invalid unmarshalling filter specification"
    resolution = (
        "Use ';'-separated elements of the form 'name', '!name', 'pkg.*', "
        "'pkg.**', 'prefix*' or 'maxdepth|maxarray|maxrefs|maxbytes=N'."
    )

    @classmethod
    def for_element(
        cls,
        element: str,
        reason: str | None = None,
        **details: Any,
    ) -> InvalidSpecification:
        """Build the error for the offending *element*."""
        text = f"Invalid unmarshalling filter specification '{element}'"
        if reason:
            text = f"{text}: {reason}"
        return cls(text, details={"element": element, **details})


# ===================================================================
# MG-E2xx  Filter Errors
# ===================================================================


class ClassRejected(FilterError):
    """MG-E200 -- A class-match element rejected the class."""

    code = "MG-E200"
    message = "Class rejected by unmarshalling filter"
    resolution = (
        "Remove the class from the stream or allow it explicitly in the "
        "filter specification."
    )


class LimitExceeded(FilterError):
    """MG-E201 -- A structural limit of the stream was exceeded."""

    code = "MG-E201"
    message = "Stream exceeded an unmarshalling filter limit"
    resolution = "Raise the limit in the filter specification if the stream is trusted."


class UndecidedRejected(FilterError):
    """MG-E202 -- No element decided and the undecided policy rejects."""

    code = "MG-E202"
    message = "Class not allowed by any unmarshalling filter element"
    resolution = "Add an allow element that matches the class."
