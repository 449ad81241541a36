"""Shared fixtures for marshal-guard conformance tests.

Provides query builders and commonly used filter specifications.
"""
from __future__ import annotations

from collections.abc import Callable

import pytest

from marshal_guard.core.types import FilterInfo, Status
from marshal_guard.filter import SpecFilter

# ---------------------------------------------------------------------------
# Specifications used across tests
# ---------------------------------------------------------------------------
COMBINED_SPEC = "maxbytes=1000;java.lang.*;!java.lang.Runtime"


# ---------------------------------------------------------------------------
# Query builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def query() -> Callable[..., FilterInfo]:
    """Return a builder: ``query("java.lang.String", stream_bytes=10)``."""

    def _build(class_name: str | None = None, **fields: int) -> FilterInfo:
        return FilterInfo(class_name=class_name, **fields)

    return _build


@pytest.fixture()
def status_of(
    query: Callable[..., FilterInfo],
) -> Callable[..., Status]:
    """Return ``status_of(spec, class_name, **fields)`` -> Status."""

    def _status(spec: str, class_name: str | None = None, **fields: int) -> Status:
        return SpecFilter(spec).check_input(query(class_name, **fields))

    return _status


@pytest.fixture()
def combined_filter() -> SpecFilter:
    return SpecFilter(COMBINED_SPEC)
