"""Run named test procedures against named minimizer instances.

The table of implementations and the list of procedures are passed in
explicitly; nothing is registered globally.

Example
-------
>>> import numpy as np
>>> from descent.optimize import BFGS, LBFGS
>>> from descent.problems import quadratic_bowl
>>> def bowl(solver):
...     solver.solve(np.ones(3), quadratic_bowl(3))
>>> records = run_suite({"BFGS": BFGS(), "L-BFGS": LBFGS()}, [("bowl", bowl)])
>>> print(format_report(records))  # doctest: +SKIP
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Sequence, Tuple

from .logging import get_logger
from .optimize.core import MinimizerBase

logger = get_logger(__name__)

TestProcedure = Callable[[MinimizerBase], Any]


@dataclass(frozen=True)
class SuiteRecord:
    """Outcome of one test procedure on one implementation."""

    test: str
    implementation: str
    elapsed_sec: float
    iterations: int
    tolerance: float


def run_suite(
    implementations: Mapping[str, MinimizerBase],
    tests: Sequence[Tuple[str, TestProcedure]],
) -> List[SuiteRecord]:
    """Run every test procedure on every implementation.

    Procedures run in the given order, implementations in name order. Each
    run is timed with ``time.perf_counter``; the solver's ``iterations`` and
    ``tolerance`` are read right after the procedure returns. Exceptions
    raised by a procedure propagate to the caller.
    """
    records: List[SuiteRecord] = []
    for test_name, procedure in tests:
        logger.info("Running test: %s", test_name)
        for impl_name in sorted(implementations):
            solver = implementations[impl_name]
            start = time.perf_counter()
            procedure(solver)
            elapsed = time.perf_counter() - start
            record = SuiteRecord(
                test=test_name,
                implementation=impl_name,
                elapsed_sec=elapsed,
                iterations=solver.iterations,
                tolerance=solver.tolerance,
            )
            logger.info(
                "  %s: %.1f us, %d iterations, tolerance %.1e",
                impl_name,
                elapsed * 1e6,
                record.iterations,
                record.tolerance,
            )
            records.append(record)
    return records


def format_report(records: Sequence[SuiteRecord]) -> str:
    """Render records as a fixed-width table grouped by test."""
    lines: List[str] = []
    current = None
    for record in records:
        if record.test != current:
            current = record.test
            lines.append(f"== {current} ==")
            lines.append(
                f"  {'implementation':<16}{'time (us)':>14}{'iterations':>12}{'tolerance':>12}"
            )
        lines.append(
            f"  {record.implementation:<16}{record.elapsed_sec * 1e6:>14.1f}"
            f"{record.iterations:>12d}{record.tolerance:>12.1e}"
        )
    return "\n".join(lines)


__all__ = ["SuiteRecord", "TestProcedure", "format_report", "run_suite"]
