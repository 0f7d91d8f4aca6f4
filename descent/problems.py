"""Benchmark objectives with exact gradients and Hessians.

Each factory returns a :class:`~descent.optimize.Problem` for a fixed
dimension ``n``:

- ``quadratic_bowl``: ``x^T x``, minimum at the origin.
- ``rosenbrock``: chained Rosenbrock, global minimum at ``[1, ..., 1]``.
- ``rastrigin``: highly multimodal, global minimum at the origin.
- ``ackley``: multimodal with a non-smooth global minimum at the origin.
"""

from __future__ import annotations

import math

import numpy as np

from .optimize.core import Problem


def _check_dim(n: int) -> None:
    if n < 1:
        raise ValueError(f"Dimension must be >= 1, got {n}.")


def quadratic_bowl(n: int) -> Problem:
    _check_dim(n)

    def fun(x: np.ndarray) -> float:
        return float(x @ x)

    def grad(x: np.ndarray) -> np.ndarray:
        return 2.0 * x

    def hess(x: np.ndarray) -> np.ndarray:
        return 2.0 * np.eye(x.size)

    return Problem(fun=fun, grad=grad, hess=hess, dim=n)


def rosenbrock(n: int) -> Problem:
    """``sum_i 100 (x_{i+1} - x_i^2)^2 + (1 - x_i)^2``."""
    _check_dim(n)

    def fun(x: np.ndarray) -> float:
        return float(
            np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2)
        )

    def grad(x: np.ndarray) -> np.ndarray:
        g = np.zeros_like(x, dtype=float)
        if x.size == 1:
            return g
        inner = x[1:] - x[:-1] ** 2
        g[:-1] = -400.0 * x[:-1] * inner - 2.0 * (1.0 - x[:-1])
        g[1:] += 200.0 * inner
        return g

    def hess(x: np.ndarray) -> np.ndarray:
        size = x.size
        h = np.zeros((size, size))
        if size == 1:
            return h
        diag = np.zeros(size)
        diag[:-1] = 1200.0 * x[:-1] ** 2 - 400.0 * x[1:] + 2.0
        diag[1:] += 200.0
        off = -400.0 * x[:-1]
        h[np.arange(size), np.arange(size)] = diag
        h[np.arange(size - 1), np.arange(1, size)] = off
        h[np.arange(1, size), np.arange(size - 1)] = off
        return h

    return Problem(fun=fun, grad=grad, hess=hess, dim=n)


def rastrigin(n: int, amplitude: float = 10.0) -> Problem:
    """``A n + sum_i x_i^2 - A cos(2 pi x_i)``."""
    _check_dim(n)
    two_pi = 2.0 * math.pi

    def fun(x: np.ndarray) -> float:
        return float(amplitude * x.size + np.sum(x**2 - amplitude * np.cos(two_pi * x)))

    def grad(x: np.ndarray) -> np.ndarray:
        return 2.0 * x + two_pi * amplitude * np.sin(two_pi * x)

    def hess(x: np.ndarray) -> np.ndarray:
        return np.diag(2.0 + two_pi**2 * amplitude * np.cos(two_pi * x))

    return Problem(fun=fun, grad=grad, hess=hess, dim=n)


def ackley(n: int) -> Problem:
    """``-20 exp(-0.2 sqrt(mean x^2)) - exp(mean cos(2 pi x)) + 20 + e``.

    The radial term is not differentiable at the origin. There the gradient
    keeps only the periodic term, which vanishes, and the Hessian smooths the
    radius as ``sqrt(mean x^2 + 1e-12)``.
    """
    _check_dim(n)
    two_pi = 2.0 * math.pi

    def fun(x: np.ndarray) -> float:
        radius = math.sqrt(float(np.mean(x**2)))
        cos_mean = float(np.mean(np.cos(two_pi * x)))
        return -20.0 * math.exp(-0.2 * radius) - math.exp(cos_mean) + 20.0 + math.e

    def grad(x: np.ndarray) -> np.ndarray:
        size = x.size
        radius = math.sqrt(float(np.mean(x**2)))
        exp_radius = math.exp(-0.2 * radius)
        exp_cos = math.exp(float(np.mean(np.cos(two_pi * x))))
        periodic = (two_pi / size) * exp_cos * np.sin(two_pi * x)
        if radius == 0.0:
            return periodic
        return 4.0 * exp_radius * x / (size * radius) + periodic

    def hess(x: np.ndarray) -> np.ndarray:
        size = x.size
        radius = math.sqrt(float(np.mean(x**2)) + 1e-12)
        exp_radius = math.exp(-0.2 * radius)
        exp_cos = math.exp(float(np.mean(np.cos(two_pi * x))))
        sin = np.sin(two_pi * x)
        cos = np.cos(two_pi * x)
        a = x / (size * radius)
        # d/dx_j of a_i = x_i / (n r)
        da = np.eye(size) / (size * radius) - np.outer(x, x) / (
            size * size * radius**3
        )
        radial = 4.0 * (-0.2 * exp_radius * np.outer(a, a) + exp_radius * da)
        periodic = -((two_pi / size) ** 2) * exp_cos * np.outer(sin, sin)
        periodic += np.diag((two_pi**2 / size) * exp_cos * cos)
        return radial + periodic

    return Problem(fun=fun, grad=grad, hess=hess, dim=n)


__all__ = ["ackley", "quadratic_bowl", "rastrigin", "rosenbrock"]
