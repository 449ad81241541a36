"""Decoder-side enforcement of filter decisions.

The filter itself only answers ALLOW / REJECT / UNDECIDED.  A decoder
still has to decide what an undecided query means for its stream and how
a rejection is surfaced.  :class:`FilterGuard` packages the usual answer:

* an undecided outcome is resolved by a configured policy
  (``Status.ALLOW`` for denylist-style specifications, ``Status.REJECT``
  for allowlists);
* a rejection is raised as a :class:`~marshal_guard.core.errors.FilterError`
  naming the element responsible, so the decoder can abort the stream.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from marshal_guard.core.errors import (
    ClassRejected,
    LimitExceeded,
    UndecidedRejected,
)
from marshal_guard.core.interfaces import FilterInfoSource, InputFilter
from marshal_guard.core.types import Status, metric_value
from marshal_guard.filter.engine import FilterDecision, SpecFilter
from marshal_guard.filter.rules import ExactSetRule, LimitRule

if TYPE_CHECKING:
    from marshal_guard.core.config import FilterConfig

logger = logging.getLogger(__name__)


class FilterGuard:
    """Apply an :class:`InputFilter` with an explicit undecided policy.

    Parameters
    ----------
    input_filter:
        The filter to consult.  A :class:`SpecFilter` additionally reports
        the deciding rule, which ends up in error details.
    undecided:
        Final outcome when the filter is undecided.  Must be
        ``Status.ALLOW`` or ``Status.REJECT``.
    """

    def __init__(
        self,
        input_filter: InputFilter,
        *,
        undecided: Status = Status.ALLOW,
    ) -> None:
        if undecided is Status.UNDECIDED:
            msg = "undecided policy must be Status.ALLOW or Status.REJECT"
            raise ValueError(msg)
        self._filter = input_filter
        self._undecided = undecided

    @classmethod
    def from_config(cls, config: FilterConfig) -> FilterGuard:
        """Build a guard from a :class:`FilterConfig`."""
        return cls(config.build_filter(), undecided=config.undecided)

    @property
    def input_filter(self) -> InputFilter:
        return self._filter

    @property
    def undecided(self) -> Status:
        return self._undecided

    # -- checks -------------------------------------------------------------

    def check(self, info: FilterInfoSource) -> Status:
        """Return ``Status.ALLOW`` or ``Status.REJECT`` for *info*."""
        status = self._filter.check_input(info)
        if status is Status.UNDECIDED:
            return self._undecided
        return status

    def check_or_raise(self, info: FilterInfoSource) -> None:
        """Return silently if *info* may be decoded, raise otherwise.

        Raises
        ------
        LimitExceeded
            If a limit element rejected the query.
        ClassRejected
            If a class element rejected the query.
        UndecidedRejected
            If no element decided and the undecided policy rejects.
        """
        decision = self._decide(info)
        if decision.status is Status.ALLOW:
            return
        if decision.status is Status.UNDECIDED:
            if self._undecided is Status.ALLOW:
                return
            error = UndecidedRejected(
                f"Class {info.class_name!r} is not allowed by any filter element",
                details={"class_name": info.class_name},
            )
        elif isinstance(decision.rule, LimitRule):
            error = self._limit_error(decision.rule, info)
        else:
            error = ClassRejected(
                f"Class {info.class_name!r} rejected by unmarshalling filter",
                details={
                    "class_name": info.class_name,
                    "element": _element_for(decision, info),
                },
            )
        logger.warning("Unmarshalling filter rejected input: %s", error.message)
        raise error

    # -- internal helpers ---------------------------------------------------

    def _decide(self, info: FilterInfoSource) -> FilterDecision:
        if isinstance(self._filter, SpecFilter):
            return self._filter.decide(info)
        return FilterDecision(self._filter.check_input(info))

    @staticmethod
    def _limit_error(rule: LimitRule, info: FilterInfoSource) -> LimitExceeded:
        value = metric_value(info, rule.metric)
        return LimitExceeded(
            f"Stream exceeded {rule.element} (current value {value})",
            details={
                "limit": rule.metric.value,
                "threshold": rule.threshold,
                "value": value,
                "class_name": info.class_name,
            },
        )


def _element_for(decision: FilterDecision, info: FilterInfoSource) -> Any:
    rule = decision.rule
    if rule is None:
        return None
    if isinstance(rule, ExactSetRule):
        return f"{rule.polarity.marker}{info.class_name or ''}"
    return rule.element
