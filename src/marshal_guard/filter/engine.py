"""Filter decision engine.

A :class:`FilterChain` holds the rules compiled from a specification in
declaration order.  Evaluation walks the rules and returns the first
status that is not :attr:`Status.UNDECIDED`; if every rule is undecided
the chain is undecided too.  The caller owns the policy for that case.

Chains are never mutated after compilation, so one chain can be shared
by any number of decoders and threads without locking.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from marshal_guard.core.errors import InvalidSpecification
from marshal_guard.core.interfaces import FilterInfoSource
from marshal_guard.core.types import Status
from marshal_guard.filter.rules import Rule


@dataclass(frozen=True, slots=True)
class FilterDecision:
    """A status together with the rule that produced it.

    ``rule`` is ``None`` when no rule decided.
    """

    status: Status
    rule: Rule | None = None

    @property
    def decided(self) -> bool:
        return self.status is not Status.UNDECIDED


class FilterChain:
    """Ordered, immutable sequence of compiled rules.

    Parameters
    ----------
    rules:
        The rules in evaluation order.  Must not be empty.
    spec:
        The specification text the rules were compiled from, if any.
    """

    __slots__ = ("_rules", "_spec")

    def __init__(self, rules: Iterable[Rule], *, spec: str | None = None) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        if not self._rules:
            raise InvalidSpecification.for_element(
                spec or "", "no filter elements"
            )
        self._spec = spec

    # -- introspection ------------------------------------------------------

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def spec(self) -> str | None:
        return self._spec

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"FilterChain(spec={self._spec!r}, rules={len(self._rules)})"

    # -- evaluation ---------------------------------------------------------

    def evaluate(self, info: FilterInfoSource) -> Status:
        """Return the status of the first rule with an opinion on *info*."""
        for rule in self._rules:
            status = rule.apply(info)
            if status is not Status.UNDECIDED:
                return status
        return Status.UNDECIDED

    def decide(self, info: FilterInfoSource) -> FilterDecision:
        """Like :meth:`evaluate`, but also report the deciding rule."""
        for rule in self._rules:
            status = rule.apply(info)
            if status is not Status.UNDECIDED:
                return FilterDecision(status, rule)
        return FilterDecision(Status.UNDECIDED)

    def explain(self, info: FilterInfoSource) -> list[FilterDecision]:
        """Return every rule that has an opinion on *info* (diagnostics mode).

        Unlike :meth:`evaluate`, this does NOT stop at the first decisive
        rule.  The first entry, if any, is the one :meth:`evaluate` uses.
        """
        decisions: list[FilterDecision] = []
        for rule in self._rules:
            status = rule.apply(info)
            if status is not Status.UNDECIDED:
                decisions.append(FilterDecision(status, rule))
        return decisions


def evaluate(chain: FilterChain, info: FilterInfoSource) -> Status:
    """Evaluate *chain* against *info* (first decisive rule wins)."""
    return chain.evaluate(info)


class SpecFilter:
    """Unmarshalling filter configured by a filter specification string.

    Implements the :class:`~marshal_guard.core.interfaces.InputFilter`
    protocol.  The specification is compiled once, on construction.

    Raises
    ------
    InvalidSpecification
        If *spec* violates the grammar (see
        :mod:`marshal_guard.filter.compiler`).
    """

    __slots__ = ("_chain",)

    def __init__(self, spec: str) -> None:
        from marshal_guard.filter.compiler import compile_spec

        self._chain = compile_spec(spec)

    @property
    def chain(self) -> FilterChain:
        return self._chain

    @property
    def spec(self) -> str:
        return self._chain.spec

    def check_input(self, info: FilterInfoSource) -> Status:
        return self._chain.evaluate(info)

    def decide(self, info: FilterInfoSource) -> FilterDecision:
        return self._chain.decide(info)

    def __repr__(self) -> str:
        return f"SpecFilter({self.spec!r})"


def create_filter(spec: str) -> SpecFilter:
    """Create a :class:`SpecFilter` for *spec*."""
    return SpecFilter(spec)
