import numpy as np
import pytest

from descent.optimize.utils import approx_grad, approx_hessian, check_grad
from descent.problems import rosenbrock


def test_approx_grad_matches_linear_function():
    def fun(x: np.ndarray) -> float:
        return float(3 * x[0] - 2 * x[1])

    grad = approx_grad(fun, np.array([0.2, -0.1]))
    assert np.allclose(grad, np.array([3.0, -2.0]), atol=1e-6)


def test_approx_grad_counts_evaluations():
    grad, evals = approx_grad(lambda x: float(x @ x), np.ones(4), return_evals=True)
    assert evals == 8
    assert np.allclose(grad, 2.0, atol=1e-6)


def test_approx_hessian_matches_quadratic():
    def fun(x: np.ndarray) -> float:
        return float(x[0] ** 2 + 3 * x[1] ** 2)

    hess = approx_hessian(fun, np.array([0.5, -1.5]))
    assert np.allclose(hess, np.diag([2.0, 6.0]), atol=1e-3)


def test_approx_grad_invalid_eps():
    with pytest.raises(ValueError):
        approx_grad(lambda x: float(x[0]), np.array([0.0]), eps=0.0)
    with pytest.raises(ValueError):
        approx_hessian(lambda x: float(x[0]), np.array([0.0]), eps=-1.0)


def test_check_grad_small_for_exact_gradient():
    problem = rosenbrock(3)
    assert check_grad(problem.fun, problem.grad, np.array([-1.2, 1.0, 0.3])) < 1e-4


def test_check_grad_detects_wrong_gradient():
    problem = rosenbrock(2)
    err = check_grad(problem.fun, lambda x: np.zeros(2), np.array([-1.2, 1.0]))
    assert err > 1.0
