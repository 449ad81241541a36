#!/usr/bin/env python3
"""marshal-guard quickstart.

Demonstrates the core workflow:

1. Compile a filter specification.
2. Ask the filter about a few decoder decision points.
3. Wrap the filter in a guard that turns rejections into errors.

Run:
    python examples/quickstart.py
"""
from __future__ import annotations

import logging

from marshal_guard import (
    FilterError,
    FilterGuard,
    FilterInfo,
    InvalidSpecification,
    SpecFilter,
    Status,
)

SPEC = "maxdepth=10;maxbytes=4096;!java.lang.Runtime;java.lang.*;com.example.**"


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # -- Step 1: Compile ------------------------------------------------------
    spec_filter = SpecFilter(SPEC)
    print(f"Compiled {len(spec_filter.chain)} rules:")
    for rule in spec_filter.chain:
        print(f"  {rule.element}")

    # -- Step 2: Raw decisions -------------------------------------------------
    for info in (
        FilterInfo(class_name="java.lang.String", depth=1, stream_bytes=120),
        FilterInfo(class_name="java.lang.Runtime", depth=2, stream_bytes=300),
        FilterInfo(class_name="com.example.model.Order", depth=11),
        FilterInfo(class_name="org.unknown.Thing"),
    ):
        print(f"{info.class_name}: {spec_filter.check_input(info)}")

    # -- Step 3: Allowlist enforcement -----------------------------------------
    guard = FilterGuard(spec_filter, undecided=Status.REJECT)
    try:
        guard.check_or_raise(FilterInfo(class_name="org.unknown.Thing"))
    except FilterError as exc:
        print(f"Blocked: {exc.to_dict()}")

    # -- Invalid specifications fail up front ------------------------------------
    try:
        SpecFilter("com.*.internal")
    except InvalidSpecification as exc:
        print(f"Rejected spec: {exc}")


if __name__ == "__main__":
    main()
