"""marshal-guard configuration.

Defines the validated configuration model from which a decoder builds its
filter.  The specification string itself is owned by the caller (a file,
a property, or the environment); this model only carries it.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from marshal_guard.core.errors import InvalidSpecification
from marshal_guard.core.types import Status

if TYPE_CHECKING:
    from marshal_guard.filter.engine import SpecFilter

ENV_PREFIX = "MARSHAL_GUARD_"


class FilterConfig(BaseModel):
    """Configuration for an unmarshalling filter.

    ``filter_spec`` is compiled by :meth:`build_filter`; ``undecided`` is
    the caller's policy for a query on which no element expressed an
    opinion (see :class:`~marshal_guard.filter.guard.FilterGuard`).
    """

    model_config = ConfigDict(strict=True, frozen=True)

    filter_spec: str = Field(
        description="';'-separated filter specification.",
    )
    undecided: Status = Field(
        default=Status.ALLOW,
        description=(
            "Outcome applied when every element is undecided.  Use "
            "Status.REJECT for allowlist-style specifications."
        ),
    )

    @field_validator("undecided")
    @classmethod
    def _undecided_is_final(cls, value: Status) -> Status:
        if value is Status.UNDECIDED:
            msg = "undecided policy must be 'allow' or 'reject'"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = ENV_PREFIX,
    ) -> FilterConfig:
        """Read ``<prefix>FILTER_SPEC`` and ``<prefix>UNDECIDED``.

        Raises
        ------
        InvalidSpecification
            If the specification variable is not set.
        ValueError
            If the undecided policy is not a known status.
        """
        env = os.environ if environ is None else environ
        spec_var = f"{prefix}FILTER_SPEC"
        spec = env.get(spec_var)
        if spec is None:
            raise InvalidSpecification(
                f"Environment variable {spec_var} is not set",
                details={"variable": spec_var},
            )
        undecided = Status(env.get(f"{prefix}UNDECIDED", Status.ALLOW.value).lower())
        return cls(filter_spec=spec, undecided=undecided)

    def build_filter(self) -> SpecFilter:
        """Compile :attr:`filter_spec` into a :class:`SpecFilter`."""
        from marshal_guard.filter.engine import SpecFilter

        return SpecFilter(self.filter_spec)
