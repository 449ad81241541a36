"""marshal-guard structural interfaces.

The filter sits between two collaborators it does not own: the decoder
that builds queries, and whatever code consumes a filter.  Both seams are
expressed as ``typing.Protocol`` classes decorated with
``@runtime_checkable`` so that ``isinstance`` checks work at run-time in
addition to static analysis.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from marshal_guard.core.types import Status


@runtime_checkable
class FilterInfoSource(Protocol):
    """Read-only view of the decoder state at one decision point.

    :class:`~marshal_guard.core.types.FilterInfo` is the reference
    implementation; decoders may pass any object with these attributes.
    """

    @property
    def class_name(self) -> str | None: ...

    @property
    def depth(self) -> int: ...

    @property
    def array_length(self) -> int | None: ...

    @property
    def references(self) -> int: ...

    @property
    def stream_bytes(self) -> int: ...


@runtime_checkable
class InputFilter(Protocol):
    """A filter consulted by a decoder at every decision point."""

    def check_input(self, info: FilterInfoSource) -> Status:
        """Return the decision for *info*.

        Implementations MUST NOT raise for a well-formed query; refusing
        the input is expressed as :attr:`Status.REJECT`.
        """
        ...
