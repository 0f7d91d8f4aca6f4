"""Benchmark every minimizer on the Rosenbrock, Ackley and Rastrigin problems."""

from typing import Callable, Dict, List, Tuple

import numpy as np

from descent.optimize import BFGS, LBFGS, MinimizerBase, Newton
from descent.problems import ackley, rastrigin, rosenbrock
from descent.suite import format_report, run_suite


def _procedure(
    problem_factory: Callable, x0: np.ndarray, max_iterations: int, tol: float
) -> Callable[[MinimizerBase], float]:
    """Build a procedure that solves one problem and returns ||grad(x)||."""

    def run(solver: MinimizerBase) -> float:
        problem = problem_factory(x0.size)
        solver.set_max_iterations(max_iterations)
        solver.set_tolerance(tol)
        result = solver.solve(x0, problem)
        return result.grad_norm

    return run


def build_tests() -> List[Tuple[str, Callable[[MinimizerBase], float]]]:
    return [
        (
            "rosenbrock function",
            _procedure(rosenbrock, np.array([-1.2, 1.0, -1.2, 1.0]), 4000, 1e-12),
        ),
        (
            "ackley function",
            _procedure(ackley, np.array([10.0, -5.0, 1.0]), 4000, 1e-10),
        ),
        (
            "rastrigin function",
            _procedure(rastrigin, np.array([4.0, -4.0, 4.0, -4.0, 4.0]), 5000, 1e-9),
        ),
    ]


def build_implementations() -> Dict[str, MinimizerBase]:
    return {"BFGS": BFGS(), "L-BFGS": LBFGS(), "Newton": Newton()}


if __name__ == "__main__":
    print("Benchmarking minimizers...")
    records = run_suite(build_implementations(), build_tests())
    print(format_report(records))
