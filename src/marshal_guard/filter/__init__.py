"""marshal-guard filter -- specification compiler and decision engine.

This subpackage provides:

* **compile_spec** / **parse_element** -- the specification compiler
  turning a ``;``-separated filter specification into rules.
* **FilterChain** / **evaluate** -- ordered, first-decisive-rule-wins
  evaluation of compiled rules.
* **SpecFilter** / **create_filter** -- the filter object a decoder
  consults at every decision point.
* **FilterGuard** -- decoder-side helper applying an undecided policy and
  raising on rejection.
"""
from __future__ import annotations

from marshal_guard.filter.compiler import (
    ElementKind,
    ParsedElement,
    compile_spec,
    parse_element,
)
from marshal_guard.filter.engine import (
    FilterChain,
    FilterDecision,
    SpecFilter,
    create_filter,
    evaluate,
)
from marshal_guard.filter.guard import FilterGuard
from marshal_guard.filter.rules import (
    ExactSetRule,
    HierarchyRule,
    LimitRule,
    PackageRule,
    PrefixRule,
    Rule,
)

__all__ = [
    "ElementKind",
    "ExactSetRule",
    "FilterChain",
    "FilterDecision",
    "FilterGuard",
    "HierarchyRule",
    "LimitRule",
    "PackageRule",
    "ParsedElement",
    "PrefixRule",
    "Rule",
    "SpecFilter",
    "compile_spec",
    "create_filter",
    "evaluate",
    "parse_element",
]
