"""Compiled filter rules.

Each element of a filter specification compiles to one of the rule
variants below.  A rule maps a query to a :class:`Status`; it returns
:attr:`Status.UNDECIDED` when it has no opinion so that the engine moves
on to the next rule.

Matching is deliberately limited to prefix tests: wildcards may only
appear at the end of a class element, so every class rule is a
``str.startswith`` (plus one ``rfind`` for single-package rules) or a set
lookup.  Every rule is a frozen dataclass; exact-name sets are frozensets
assembled by the compiler before the rule is built.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from marshal_guard.core.interfaces import FilterInfoSource
from marshal_guard.core.types import (
    LimitMetric,
    Polarity,
    Status,
    class_name_for,
    metric_value,
)

# ---------------------------------------------------------------------------
# Limit rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LimitRule:
    """``<metric>=<threshold>`` -- rejects once *metric* exceeds *threshold*.

    ``source`` is the element text as written (``maxdepth=+007``); it does
    not take part in equality.
    """

    metric: LimitMetric
    threshold: int
    source: str | None = field(default=None, compare=False, repr=False)

    @property
    def element(self) -> str:
        if self.source is not None:
            return self.source
        return f"{self.metric.value}={self.threshold}"

    def apply(self, info: FilterInfoSource) -> Status:
        if metric_value(info, self.metric) > self.threshold:
            return Status.REJECT
        return Status.UNDECIDED


# ---------------------------------------------------------------------------
# Class-match rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ExactSetRule:
    """All exact class-name elements of one polarity, as a single set lookup.

    The compiler builds at most one instance per polarity, once every
    element has been read, and places it in the chain where the first
    exact element of that polarity occurs.
    """

    polarity: Polarity
    names: frozenset[str]

    @property
    def element(self) -> str:
        marker = self.polarity.marker
        return ";".join(f"{marker}{name}" for name in sorted(self.names))

    def apply(self, info: FilterInfoSource) -> Status:
        if class_name_for(info) in self.names:
            return self.polarity.match_status
        return Status.UNDECIDED


@dataclass(frozen=True, slots=True)
class PackageRule:
    """``pkg.*`` -- classes that reside directly in ``pkg``.

    ``package`` keeps its trailing ``.`` so that the last ``.`` of a
    matching class name is the last character of ``package``.
    """

    polarity: Polarity
    package: str

    @property
    def element(self) -> str:
        return f"{self.polarity.marker}{self.package}*"

    def apply(self, info: FilterInfoSource) -> Status:
        name = class_name_for(info)
        if name.startswith(self.package) and name.rfind(".") == len(self.package) - 1:
            return self.polarity.match_status
        return Status.UNDECIDED


@dataclass(frozen=True, slots=True)
class HierarchyRule:
    """``pkg.**`` -- classes in ``pkg`` or any of its sub-packages."""

    polarity: Polarity
    prefix: str

    @property
    def element(self) -> str:
        return f"{self.polarity.marker}{self.prefix}**"

    def apply(self, info: FilterInfoSource) -> Status:
        if class_name_for(info).startswith(self.prefix):
            return self.polarity.match_status
        return Status.UNDECIDED


@dataclass(frozen=True, slots=True)
class PrefixRule:
    """``prefix*`` -- plain "starts with"; an empty prefix matches everything."""

    polarity: Polarity
    prefix: str

    @property
    def element(self) -> str:
        return f"{self.polarity.marker}{self.prefix}*"

    def apply(self, info: FilterInfoSource) -> Status:
        if class_name_for(info).startswith(self.prefix):
            return self.polarity.match_status
        return Status.UNDECIDED


Rule = LimitRule | ExactSetRule | PackageRule | HierarchyRule | PrefixRule
ClassRule = ExactSetRule | PackageRule | HierarchyRule | PrefixRule
