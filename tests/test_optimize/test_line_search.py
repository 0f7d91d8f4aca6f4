import numpy as np
import pytest

from descent.optimize.line_search import backtracking_armijo, wolfe_line_search


def quadratic_fun(x: np.ndarray) -> float:
    return float(x.T @ x)


def quadratic_grad(x: np.ndarray) -> np.ndarray:
    return 2 * x


def rosen(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosen_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def test_wolfe_bisects_after_overshoot():
    x = np.array([1.0, -2.0])
    direction = -quadratic_grad(x)
    res = wolfe_line_search(quadratic_fun, quadratic_grad, x, direction)
    # alpha = 1 lands on -x (no decrease); the bracket midpoint hits the minimum
    assert res.success
    assert res.alpha == 0.5
    assert res.nfev == 3
    assert res.njev == 2


def test_wolfe_doubles_short_steps():
    x = np.array([1.0])
    direction = -1e-3 * quadratic_grad(x)
    res = wolfe_line_search(quadratic_fun, quadratic_grad, x, direction)
    assert res.success
    assert res.alpha == 64.0


def test_wolfe_conditions_rosenbrock():
    x = np.array([-1.2, 1.0])
    grad = rosen_grad(x)
    direction = -grad
    res = wolfe_line_search(rosen, rosen_grad, x, direction)
    assert res.success
    alpha = res.alpha
    phi0 = rosen(x)
    phi_alpha = rosen(x + alpha * direction)
    directional_derivative = rosen_grad(x + alpha * direction) @ direction
    assert phi_alpha <= phi0 + 1e-4 * alpha * (grad @ direction)
    assert directional_derivative >= 0.9 * (grad @ direction)


def test_wolfe_armijo_holds_on_success(rng: np.random.Generator):
    A = rng.standard_normal((4, 4))
    A = A @ A.T + 0.1 * np.eye(4)

    def fun(x: np.ndarray) -> float:
        return 0.5 * float(x @ (A @ x)) + float(np.sum(np.cos(x)))

    def grad(x: np.ndarray) -> np.ndarray:
        return A @ x - np.sin(x)

    for _ in range(20):
        x = rng.standard_normal(4) * 3
        g = grad(x)
        direction = -g * rng.uniform(0.01, 10.0)
        res = wolfe_line_search(fun, grad, x, direction, c1=1e-3, c2=0.5)
        assert res.alpha > 0
        if res.success:
            assert fun(x + res.alpha * direction) <= fun(x) + 1e-3 * res.alpha * (
                g @ direction
            )


def test_wolfe_fallback_returns_last_alpha():
    x = np.array([1.0, -2.0])
    direction = -quadratic_grad(x)
    res = wolfe_line_search(quadratic_fun, quadratic_grad, x, direction, max_iter=1)
    assert not res.success
    assert res.alpha == 0.5


def test_wolfe_invalid_constants():
    x = np.array([1.0])
    direction = -quadratic_grad(x)
    with pytest.raises(ValueError):
        wolfe_line_search(quadratic_fun, quadratic_grad, x, direction, c1=0.9, c2=0.1)
    with pytest.raises(ValueError):
        wolfe_line_search(quadratic_fun, quadratic_grad, x, direction, rho=1.0)
    with pytest.raises(ValueError):
        wolfe_line_search(quadratic_fun, quadratic_grad, x, direction, max_iter=0)


def test_backtracking_armijo_monotone():
    x = np.array([1.0, -2.0])
    grad = quadratic_grad(x)
    direction = -grad
    res = backtracking_armijo(quadratic_fun, quadratic_grad, x, direction)
    assert res.success
    assert 0 < res.alpha <= 1.0
    new_val = quadratic_fun(x + res.alpha * direction)
    assert new_val <= quadratic_fun(x)
    assert res.nfev > 0


def test_backtracking_armijo_raises_on_invalid_params():
    x = np.array([1.0])
    grad = quadratic_grad(x)
    with pytest.raises(ValueError):
        backtracking_armijo(quadratic_fun, quadratic_grad, x, -grad, c1=1.5)
    with pytest.raises(ValueError):
        backtracking_armijo(quadratic_fun, quadratic_grad, x, -grad, rho=1.1)
