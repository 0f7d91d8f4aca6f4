"""
Example: BFGS and L-BFGS on the Rastrigin function

Minimizes the 15-dimensional Rastrigin function from ``x_i = 0.25 i`` with
both quasi-Newton solvers and prints the point each one reaches together
with the objective value, iteration count and final gradient norm.
"""

import numpy as np

from descent import BFGS, LBFGS, MinimizerBase
from descent.problems import rastrigin


def run_solver(solver: MinimizerBase, x0: np.ndarray) -> None:
    problem = rastrigin(x0.size)
    solver.set_max_iterations(4000)
    solver.set_tolerance(1e-8)
    result = solver.solve(x0, problem)

    print("=" * 8 + solver.name + "=" * 8)
    print("computed result:")
    print(np.array2string(result.x, precision=6))
    print()
    print(f"Function value: {result.fun:.6f}")
    print(f"iterations: {solver.iterations}")
    print(f"tolerance: {solver.tolerance:.1e}")
    print(f"error norm: {np.linalg.norm(problem.grad(result.x)):.3e}")
    print()


def main():
    n = 15
    x0 = 0.25 * np.arange(n, dtype=float)
    bfgs = BFGS(initial_hessian=np.eye(n))
    run_solver(bfgs, x0)
    run_solver(LBFGS(), x0)


if __name__ == "__main__":
    main()
