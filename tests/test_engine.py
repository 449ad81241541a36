"""Tests for compiled rules and the decision engine.

Covers:

1. **Rule variants** -- limit, exact set, package, hierarchy, prefix.
2. **Chain evaluation** -- first decisive rule wins, all-undecided result.
3. **Diagnostics** -- ``decide`` and ``explain``.
4. **SpecFilter** -- the InputFilter implementation and factory.
5. **Concurrency** -- one chain shared by many threads.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import FrozenInstanceError, dataclass

import pytest

from marshal_guard.core.errors import InvalidSpecification
from marshal_guard.core.interfaces import FilterInfoSource, InputFilter
from marshal_guard.core.types import FilterInfo, LimitMetric, Polarity, Status
from marshal_guard.filter import (
    ExactSetRule,
    FilterChain,
    FilterDecision,
    HierarchyRule,
    LimitRule,
    PackageRule,
    PrefixRule,
    SpecFilter,
    compile_spec,
    create_filter,
    evaluate,
)


def q(class_name: str | None = None, **fields: int) -> FilterInfo:
    return FilterInfo(class_name=class_name, **fields)


# ===================================================================
# Test: rule variants
# ===================================================================


class TestLimitRule:
    def test_rejects_only_above_threshold(self) -> None:
        rule = LimitRule(LimitMetric.DEPTH, 3)
        assert rule.apply(q(depth=4)) is Status.REJECT
        assert rule.apply(q(depth=3)) is Status.UNDECIDED
        assert rule.apply(q(depth=0)) is Status.UNDECIDED

    def test_zero_threshold(self) -> None:
        rule = LimitRule(LimitMetric.REFERENCES, 0)
        assert rule.apply(q(references=0)) is Status.UNDECIDED
        assert rule.apply(q(references=1)) is Status.REJECT

    def test_array_limit_ignores_non_arrays(self) -> None:
        rule = LimitRule(LimitMetric.ARRAY, 0)
        assert rule.apply(q("Foo")) is Status.UNDECIDED
        assert rule.apply(q("Foo", array_length=0)) is Status.UNDECIDED
        assert rule.apply(q("Foo", array_length=1)) is Status.REJECT

    def test_bytes_limit(self) -> None:
        rule = LimitRule(LimitMetric.BYTES, 1000)
        assert rule.apply(q(stream_bytes=1000)) is Status.UNDECIDED
        assert rule.apply(q(stream_bytes=1001)) is Status.REJECT

    def test_limit_ignores_class(self) -> None:
        rule = LimitRule(LimitMetric.DEPTH, 1)
        assert rule.apply(q("java.lang.String", depth=2)) is Status.REJECT


class TestClassRules:
    def test_exact_set_allow(self) -> None:
        rule = ExactSetRule(Polarity.ALLOW, frozenset({"com.a.X", "com.a.Y"}))
        assert rule.apply(q("com.a.X")) is Status.ALLOW
        assert rule.apply(q("com.a.Y")) is Status.ALLOW
        assert rule.apply(q("com.a.Z")) is Status.UNDECIDED
        assert rule.apply(q()) is Status.UNDECIDED

    def test_exact_set_deny(self) -> None:
        rule = ExactSetRule(Polarity.DENY, frozenset({"com.a.X"}))
        assert rule.apply(q("com.a.X")) is Status.REJECT

    def test_exact_set_element_lists_names(self) -> None:
        rule = ExactSetRule(Polarity.DENY, frozenset({"b.Y", "a.X"}))
        assert rule.element == "!a.X;!b.Y"

    def test_package_direct_members_only(self) -> None:
        rule = PackageRule(Polarity.ALLOW, "com.example.")
        assert rule.apply(q("com.example.Foo")) is Status.ALLOW
        assert rule.apply(q("com.example.sub.Bar")) is Status.UNDECIDED
        assert rule.apply(q("com.examples.Foo")) is Status.UNDECIDED
        assert rule.apply(q("com.example")) is Status.UNDECIDED

    def test_package_matches_empty_simple_name(self) -> None:
        rule = PackageRule(Polarity.ALLOW, "com.example.")
        assert rule.apply(q("com.example.")) is Status.ALLOW

    def test_hierarchy(self) -> None:
        rule = HierarchyRule(Polarity.DENY, "com.example.")
        assert rule.apply(q("com.example.Foo")) is Status.REJECT
        assert rule.apply(q("com.example.sub.deep.Bar")) is Status.REJECT
        assert rule.apply(q("com.examples.Foo")) is Status.UNDECIDED
        assert rule.apply(q("com.example")) is Status.UNDECIDED

    def test_prefix(self) -> None:
        rule = PrefixRule(Polarity.ALLOW, "Abc")
        assert rule.apply(q("AbcDef")) is Status.ALLOW
        assert rule.apply(q("Abc")) is Status.ALLOW
        assert rule.apply(q("XAbc")) is Status.UNDECIDED

    def test_empty_prefix_matches_absent_class(self) -> None:
        rule = PrefixRule(Polarity.ALLOW, "")
        assert rule.apply(q()) is Status.ALLOW
        assert rule.apply(q("anything")) is Status.ALLOW

    def test_absent_class_never_matches_a_package(self) -> None:
        assert PackageRule(Polarity.ALLOW, "a.").apply(q()) is Status.UNDECIDED
        assert HierarchyRule(Polarity.ALLOW, "a.").apply(q()) is Status.UNDECIDED

    def test_element_text(self) -> None:
        assert PackageRule(Polarity.DENY, "a.b.").element == "!a.b.*"
        assert HierarchyRule(Polarity.ALLOW, "a.b.").element == "a.b.**"
        assert PrefixRule(Polarity.ALLOW, "").element == "*"
        assert LimitRule(LimitMetric.ARRAY, 9).element == "maxarray=9"


# ===================================================================
# Test: chain evaluation
# ===================================================================


class TestFilterChain:
    def test_first_decisive_rule_wins(self) -> None:
        chain = compile_spec("com.a.*;!com.a.X")
        assert chain.evaluate(q("com.a.X")) is Status.ALLOW

    def test_deny_first_wins(self) -> None:
        chain = compile_spec("!com.a.X;com.a.*")
        assert chain.evaluate(q("com.a.X")) is Status.REJECT
        assert chain.evaluate(q("com.a.Y")) is Status.ALLOW

    def test_all_undecided(self) -> None:
        chain = compile_spec("com.a.*;maxdepth=5")
        assert chain.evaluate(q("org.b.Y", depth=2)) is Status.UNDECIDED

    def test_module_level_evaluate(self) -> None:
        chain = compile_spec("Foo")
        assert evaluate(chain, q("Foo")) is Status.ALLOW

    def test_idempotent(self) -> None:
        chain = compile_spec("maxdepth=3;java.lang.*;!java.lang.Runtime")
        info = q("java.lang.Runtime", depth=2)
        results = {chain.evaluate(info) for _ in range(10)}
        # The package element precedes the exact deny element.
        assert results == {Status.ALLOW}

    def test_empty_chain_rejected(self) -> None:
        with pytest.raises(InvalidSpecification):
            FilterChain([])

    def test_rules_are_a_tuple(self) -> None:
        chain = compile_spec("a.*;b.*")
        assert isinstance(chain.rules, tuple)
        assert list(chain) == list(chain.rules)

    def test_compiled_rules_cannot_be_changed(self) -> None:
        spec_filter = SpecFilter("!com.evil.Bad;com.**")
        exact = spec_filter.chain.rules[0]
        assert isinstance(exact, ExactSetRule)
        assert not hasattr(exact, "add")
        with pytest.raises(AttributeError):
            exact.names.add("com.good.Thing")  # type: ignore[attr-defined]
        with pytest.raises(FrozenInstanceError):
            exact.names = frozenset({"com.good.Thing"})  # type: ignore[misc]
        assert spec_filter.check_input(q("com.good.Thing")) is Status.ALLOW
        assert spec_filter.check_input(q("com.evil.Bad")) is Status.REJECT

    def test_duck_typed_query(self) -> None:
        @dataclass(frozen=True)
        class DecoderState:
            class_name: str | None
            depth: int
            array_length: int | None
            references: int
            stream_bytes: int

        state = DecoderState("com.a.X", 9, None, 0, 0)
        assert isinstance(state, FilterInfoSource)
        chain = compile_spec("maxdepth=8;com.a.X")
        assert chain.evaluate(state) is Status.REJECT


class TestDiagnostics:
    def test_decide_reports_rule(self) -> None:
        chain = compile_spec("maxbytes=10;!com.a.X")
        decision = chain.decide(q("com.a.X", stream_bytes=5))
        assert decision.status is Status.REJECT
        assert isinstance(decision.rule, ExactSetRule)
        assert decision.decided

    def test_decide_undecided_has_no_rule(self) -> None:
        chain = compile_spec("com.a.*")
        assert chain.decide(q("org.X")) == FilterDecision(Status.UNDECIDED)
        assert not chain.decide(q("org.X")).decided

    def test_explain_lists_every_opinion(self) -> None:
        chain = compile_spec("com.a.**;maxdepth=1;!com.a.X")
        decisions = chain.explain(q("com.a.X", depth=2))
        assert [d.status for d in decisions] == [
            Status.ALLOW,
            Status.REJECT,
            Status.REJECT,
        ]
        assert decisions[0].status is chain.evaluate(q("com.a.X", depth=2))


# ===================================================================
# Test: SpecFilter
# ===================================================================


class TestSpecFilter:
    def test_implements_input_filter(self) -> None:
        assert isinstance(SpecFilter("*"), InputFilter)

    def test_check_input(self) -> None:
        spec_filter = create_filter("!java.lang.Runtime;java.lang.*")
        assert spec_filter.check_input(q("java.lang.Runtime")) is Status.REJECT
        assert spec_filter.check_input(q("java.lang.String")) is Status.ALLOW
        assert spec_filter.check_input(q("java.util.List")) is Status.UNDECIDED

    def test_exposes_spec_and_chain(self) -> None:
        spec_filter = SpecFilter("maxdepth=2")
        assert spec_filter.spec == "maxdepth=2"
        assert len(spec_filter.chain) == 1
        assert repr(spec_filter) == "SpecFilter('maxdepth=2')"

    def test_invalid_spec_fails_construction(self) -> None:
        with pytest.raises(InvalidSpecification):
            SpecFilter("a/b")

    def test_shared_across_threads(self) -> None:
        spec_filter = SpecFilter("maxdepth=5;!com.evil.*;com.**")
        queries = [
            (q("com.evil.Gadget"), Status.REJECT),
            (q("com.good.Thing"), Status.ALLOW),
            (q("com.good.Thing", depth=6), Status.REJECT),
            (q("org.other.Thing"), Status.UNDECIDED),
        ] * 250

        def run(item: tuple[FilterInfo, Status]) -> bool:
            info, expected = item
            return spec_filter.check_input(info) is expected

        with ThreadPoolExecutor(max_workers=8) as pool:
            assert all(pool.map(run, queries))
