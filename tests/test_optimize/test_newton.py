import numpy as np
import pytest

from descent.optimize import (
    Newton,
    Problem,
    SolverConfig,
    backtracking_armijo,
    newton_direction,
    newton_method,
)
from descent.problems import ackley, quadratic_bowl, rastrigin, rosenbrock


def test_newton_solves_quadratic_in_one_step():
    A = np.array([[3.0, 0.5], [0.5, 2.0]])
    b = np.array([1.0, -1.0])

    def fun(x: np.ndarray) -> float:
        return 0.5 * x @ (A @ x) - b @ x

    def grad(x: np.ndarray) -> np.ndarray:
        return A @ x - b

    def hess(_: np.ndarray) -> np.ndarray:
        return A

    problem = Problem(fun=fun, grad=grad, hess=hess, dim=2)
    res = newton_method(problem, np.array([2.0, 2.0]), maxiter=5)
    expected = np.linalg.solve(A, b)
    assert res.success
    assert res.nit == 1
    assert np.allclose(res.x, expected, atol=1e-10)


def test_newton_quadratic_bowl():
    solver = Newton(SolverConfig(tolerance=1e-10))
    res = solver.solve(np.ones(5), quadratic_bowl(5))
    assert res.success
    assert res.nit <= 10
    assert solver.iterations == res.nit
    assert np.allclose(res.x, 0.0)


def test_newton_ackley_with_exact_hessian():
    solver = Newton()
    solver.set_max_iterations(4000)
    solver.set_tolerance(1e-10)
    problem = ackley(3)
    res = solver.solve(np.array([10.0, -5.0, 1.0]), problem)
    assert np.linalg.norm(problem.grad(res.x)) <= 1e-9


def test_newton_rastrigin_converges():
    solver = Newton(SolverConfig(max_iterations=5000, tolerance=1e-9))
    problem = rastrigin(5)
    res = solver.solve(np.array([4.0, -4.0, 4.0, -4.0, 4.0]), problem)
    assert np.linalg.norm(problem.grad(res.x)) <= 1e-8


def test_newton_stops_at_iteration_cap():
    solver = Newton(SolverConfig(max_iterations=3))
    res = solver.solve(np.array([-1.2, 1.0]), rosenbrock(2))
    assert not res.success
    assert res.nit == 3
    assert solver.iterations == 3
    assert res.message == "Maximum iterations reached."


def test_newton_direction_falls_back_to_steepest_descent():
    grad = np.array([1.0, 0.0])
    step = newton_direction(-np.eye(2), grad)
    assert np.array_equal(step, -grad)


def test_newton_rejects_non_square_hessian():
    with pytest.raises(ValueError, match="square"):
        newton_direction(np.ones((2, 3)), np.ones(2))


def test_newton_rejects_mismatched_hessian():
    problem = Problem(
        fun=lambda x: float(x @ x),
        grad=lambda x: 2 * x,
        hess=lambda x: 2 * np.eye(3),
    )
    with pytest.raises(ValueError, match="size mismatch"):
        Newton().solve(np.ones(2), problem)


def test_newton_factorization_failure_is_fatal():
    problem = Problem(
        fun=lambda x: float(x[0] * x[1]),
        grad=lambda x: np.array([x[1], x[0]]),
        hess=lambda x: np.array([[0.0, 1.0], [1.0, 0.0]]),
    )
    with pytest.raises(np.linalg.LinAlgError):
        Newton().solve(np.array([1.0, 2.0]), problem)


def test_set_hessian_overrides_problem_hessian():
    calls = {"count": 0}

    def hess(x: np.ndarray) -> np.ndarray:
        calls["count"] += 1
        return 2 * np.eye(x.size)

    problem = quadratic_bowl(3)
    solver = Newton()
    solver.set_hessian(hess)
    res = solver.solve(np.array([1.0, -2.0, 3.0]), problem)
    assert res.success
    assert calls["count"] == res.nhev


def test_newton_evaluation_counters():
    counts = {"f": 0, "g": 0, "h": 0}
    base = rosenbrock(2)

    def fun(x):
        counts["f"] += 1
        return base.fun(x)

    def grad(x):
        counts["g"] += 1
        return base.grad(x)

    def hess(x):
        counts["h"] += 1
        return base.hess(x)

    res = newton_method(Problem(fun=fun, grad=grad, hess=hess), np.array([-1.2, 1.0]))
    assert res.success
    assert res.nfev == counts["f"]
    assert res.njev == counts["g"]
    assert res.nhev == counts["h"]


def test_newton_fallback_gradient_and_hessian():
    def fun(x: np.ndarray) -> float:
        return float(np.sum((x - 1.0) ** 2))

    problem = Problem(fun=fun, dim=2)
    res = newton_method(problem, np.array([2.5, -3.0]), maxiter=20, tol=1e-6)
    assert res.success
    assert res.grad_norm < 1e-6
    assert res.njev == 0
    assert res.nhev == 0


def test_newton_with_armijo_line_search():
    problem = quadratic_bowl(2)
    res = newton_method(
        problem,
        np.array([3.0, -4.0]),
        line_search=backtracking_armijo,
    )
    assert res.success
    assert np.allclose(res.x, 0.0)


def test_newton_history_tracking():
    res = newton_method(rosenbrock(2), np.array([-1.2, 1.0]), history=True)
    assert res.success
    assert len(res.history) == res.nit + 1
    assert np.array_equal(res.history[-1], res.x)


def test_newton_zero_iterations_when_started_at_minimum():
    res = newton_method(quadratic_bowl(2), np.zeros(2), maxiter=1)
    assert res.success
    assert res.nit == 0
