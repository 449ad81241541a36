"""Filter specification compiler.

A filter specification is a ``;``-separated list of elements.  Elements
are taken literally (no whitespace trimming); empty elements are skipped.

* ``type=value`` -- a limit element.  ``type`` is one of ``maxdepth``,
  ``maxarray``, ``maxrefs`` or ``maxbytes`` and ``value`` a non-negative
  64-bit integer literal.
* ``name`` -- allow exactly ``name``.
* ``pkg.*`` -- allow classes residing directly in package ``pkg``.
* ``pkg.**`` -- allow classes in ``pkg`` and all of its sub-packages.
* ``prefix*`` -- allow class names starting with ``prefix`` (``*`` alone
  allows everything).
* A leading ``!`` turns any class element into a deny element.

Any ``/`` (module patterns) or ``*`` outside the forms above makes the
whole specification invalid.  Exact elements of one polarity are merged
into a single :class:`~marshal_guard.filter.rules.ExactSetRule` that sits
at the position of the first of them.
"""
from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass

from marshal_guard.core.errors import InvalidSpecification
from marshal_guard.core.types import LimitMetric, Polarity
from marshal_guard.filter.engine import FilterChain
from marshal_guard.filter.rules import (
    ExactSetRule,
    HierarchyRule,
    LimitRule,
    PackageRule,
    PrefixRule,
    Rule,
)

logger = logging.getLogger(__name__)

ELEMENT_SEPARATOR = ";"
DENY_MARKER = "!"
WILDCARD = "*"

LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1

_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")


class ElementKind(enum.StrEnum):
    """Shape of a parsed specification element."""

    LIMIT = "limit"
    EXACT = "exact"
    PACKAGE = "package"
    HIERARCHY = "hierarchy"
    PREFIX = "prefix"


@dataclass(frozen=True, slots=True)
class ParsedElement:
    """One element of a specification, validated but not yet compiled.

    Attributes
    ----------
    element:
        The element text as written in the specification.
    kind:
        The element shape.
    polarity:
        ``None`` for limit elements.
    pattern:
        Class name, package (with trailing ``.``), or prefix to match.
    metric / threshold:
        Set for limit elements only.
    """

    element: str
    kind: ElementKind
    polarity: Polarity | None = None
    pattern: str = ""
    metric: LimitMetric | None = None
    threshold: int | None = None

    def to_rule(self) -> Rule:
        """Build a standalone rule for this element.

        Exact elements are shared between elements, so the compiler builds
        their :class:`ExactSetRule` itself.
        """
        if self.kind is ElementKind.LIMIT:
            return LimitRule(self.metric, self.threshold, source=self.element)
        if self.kind is ElementKind.PACKAGE:
            return PackageRule(self.polarity, self.pattern)
        if self.kind is ElementKind.HIERARCHY:
            return HierarchyRule(self.polarity, self.pattern)
        if self.kind is ElementKind.PREFIX:
            return PrefixRule(self.polarity, self.pattern)
        return ExactSetRule(self.polarity, frozenset({self.pattern}))


# ---------------------------------------------------------------------------
# Element parsing
# ---------------------------------------------------------------------------


def parse_element(element: str) -> ParsedElement:
    """Parse and validate a single specification element.

    Raises
    ------
    InvalidSpecification
        If the element violates the grammar.
    """
    if "/" in element:
        raise InvalidSpecification.for_element(
            element, "module patterns are not supported"
        )
    eq_pos = element.find("=")
    if eq_pos > -1:
        return _parse_limit(element, eq_pos)
    return _parse_class(element)


def _parse_limit(element: str, eq_pos: int) -> ParsedElement:
    name = element[:eq_pos]
    raw_value = element[eq_pos + 1:]
    if not raw_value:
        raise InvalidSpecification.for_element(element, "missing limit value")
    try:
        threshold = parse_long(raw_value)
    except ValueError as exc:
        raise InvalidSpecification.for_element(
            element, f"invalid limit value: {exc}"
        ) from exc
    if threshold < 0:
        raise InvalidSpecification.for_element(
            element, "limit value must not be negative"
        )
    try:
        metric = LimitMetric(name)
    except ValueError:
        raise InvalidSpecification.for_element(
            element, f"unknown limit {name!r}"
        ) from None
    return ParsedElement(
        element=element,
        kind=ElementKind.LIMIT,
        metric=metric,
        threshold=threshold,
    )


def _parse_class(element: str) -> ParsedElement:
    polarity = Polarity.ALLOW
    pattern = element
    if element.startswith(DENY_MARKER):
        if len(element) == 1:
            raise InvalidSpecification.for_element(
                element, "negation without a class pattern"
            )
        polarity = Polarity.DENY
        pattern = element[1:]

    last_star = pattern.rfind(WILDCARD)
    if last_star < 0:
        return ParsedElement(element, ElementKind.EXACT, polarity, pattern)
    if last_star != len(pattern) - 1:
        raise InvalidSpecification.for_element(
            element, "wildcards are only allowed at the end"
        )

    first_star = pattern.find(WILDCARD)
    if first_star != last_star:
        if first_star == last_star - 1 and pattern.endswith(".**"):
            if len(pattern) == 3:
                raise InvalidSpecification.for_element(element, "empty package")
            return ParsedElement(
                element, ElementKind.HIERARCHY, polarity, pattern[:-2]
            )
        raise InvalidSpecification.for_element(element, "unsupported wildcard")

    if pattern.endswith(".*"):
        if len(pattern) == 2:
            raise InvalidSpecification.for_element(element, "empty package")
        return ParsedElement(element, ElementKind.PACKAGE, polarity, pattern[:-1])
    # An empty prefix is legal: "*" matches every class name.
    return ParsedElement(element, ElementKind.PREFIX, polarity, pattern[:-1])


def parse_long(text: str) -> int:
    """Parse a signed 64-bit decimal integer literal.

    Only ASCII digits with an optional sign are accepted; whitespace,
    underscores and non-ASCII digits are rejected.  This is stricter
    than ``int()`` and than Java's ``Long.parseLong``, both of which
    accept other Unicode decimal digits.

    Raises
    ------
    ValueError
        If *text* is not such a literal or is out of range.
    """
    if not _INTEGER_LITERAL.fullmatch(text):
        msg = f"not an integer literal: {text!r}"
        raise ValueError(msg)
    value = int(text)
    if not LONG_MIN <= value <= LONG_MAX:
        msg = f"out of 64-bit range: {text!r}"
        raise ValueError(msg)
    return value


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def compile_spec(spec: str) -> FilterChain:
    """Compile *spec* into an ordered, immutable :class:`FilterChain`.

    Raises
    ------
    InvalidSpecification
        If *spec* is ``None``, any element is invalid, or the
        specification contains no elements at all.
    """
    if spec is None:
        raise InvalidSpecification(
            "Filter specification may not be None",
            details={"spec": None},
        )
    if not isinstance(spec, str):
        raise InvalidSpecification(
            f"Filter specification must be a str, got {type(spec).__name__}",
            details={"spec": repr(spec)},
        )

    # Exact names are collected per polarity; their slot in ``rules`` is
    # reserved at the first exact element and filled after the loop.
    rules: list[Rule | None] = []
    exact_slots: dict[Polarity, int] = {}
    exact_names: dict[Polarity, set[str]] = {}

    for element in spec.split(ELEMENT_SEPARATOR):
        if not element:
            continue
        parsed = parse_element(element)
        if parsed.kind is not ElementKind.EXACT:
            rules.append(parsed.to_rule())
            continue
        if parsed.polarity not in exact_slots:
            exact_slots[parsed.polarity] = len(rules)
            exact_names[parsed.polarity] = set()
            rules.append(None)
        exact_names[parsed.polarity].add(parsed.pattern)

    for polarity, slot in exact_slots.items():
        rules[slot] = ExactSetRule(polarity, frozenset(exact_names[polarity]))

    if not rules:
        raise InvalidSpecification.for_element(
            spec, "no filter elements", spec=spec
        )

    logger.debug("Compiled filter specification into %d rules", len(rules))
    return FilterChain(rules, spec=spec)
