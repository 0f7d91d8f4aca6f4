"""Inexact line searches shared by the Newton and quasi-Newton minimizers."""

from __future__ import annotations

import math

import numpy as np

from ..logging import get_logger
from .core import Array, Gradient, LineSearchResult, Objective

logger = get_logger(__name__)


def _check_constants(c1: float, c2: float, rho: float, max_iter: int) -> None:
    if not (0 < c1 < c2 < 1):
        raise ValueError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")
    if not (0 < rho < 1):
        raise ValueError("rho must lie in (0, 1)")
    if max_iter < 1:
        raise ValueError("max_iter must be >= 1")


def wolfe_line_search(
    f: Objective,
    grad: Gradient,
    x: Array,
    p: Array,
    c1: float = 1e-4,
    c2: float = 0.9,
    rho: float = 0.5,
    max_iter: int = 50,
) -> LineSearchResult:
    """Bracketing search for a step satisfying the weak Wolfe conditions.

    Starting from ``alpha = 1`` the step is doubled while no upper bound is
    known and the curvature condition fails; once a trial step violates
    sufficient decrease it becomes the upper end of the bracket and further
    trials are taken at ``rho * (alpha_min + alpha_max)``.

    Parameters
    ----------
    f, grad:
        Objective and gradient oracles.
    x:
        Current point.
    p:
        Search direction. Must be a descent direction, ``grad(x) @ p < 0``;
        this is not checked.
    c1, c2:
        Sufficient-decrease and curvature constants.
    rho:
        Contraction factor applied to the bracket.
    max_iter:
        Number of trial steps before giving up.

    Returns
    -------
    LineSearchResult
        When no trial satisfies both conditions within ``max_iter`` the last
        computed step is returned with ``success=False``. Such a step may
        violate sufficient decrease.
    """
    _check_constants(c1, c2, rho, max_iter)
    f_old = float(f(x))
    der_old = float(np.dot(grad(x), p))
    nfev = 1
    njev = 1

    alpha_min = 0.0
    alpha_max = math.inf
    alpha = 1.0

    for _ in range(max_iter):
        candidate = x + alpha * p
        f_new = float(f(candidate))
        nfev += 1
        if f_new > f_old + c1 * alpha * der_old:
            alpha_max = alpha
            alpha = rho * (alpha_min + alpha_max)
            continue
        der_new = float(np.dot(grad(candidate), p))
        njev += 1
        if der_new < c2 * der_old:
            alpha_min = alpha
            if math.isinf(alpha_max):
                alpha *= 2.0
            else:
                alpha = rho * (alpha_min + alpha_max)
            continue
        return LineSearchResult(alpha=alpha, nfev=nfev, njev=njev, success=True)

    logger.debug(
        "Wolfe line search exhausted %d trials; falling back to alpha=%.3e",
        max_iter,
        alpha,
    )
    return LineSearchResult(alpha=alpha, nfev=nfev, njev=njev, success=False)


def backtracking_armijo(
    f: Objective,
    grad: Gradient,
    x: Array,
    p: Array,
    c1: float = 1e-4,
    c2: float = 0.9,
    rho: float = 0.5,
    max_iter: int = 50,
) -> LineSearchResult:
    """Classic Armijo backtracking line search.

    Accepts the same arguments as :func:`wolfe_line_search` so it can be
    swapped into any solver; ``c2`` is validated but otherwise unused.
    """
    _check_constants(c1, c2, rho, max_iter)
    alpha = 1.0
    fx = float(f(x))
    grad_dot = float(np.dot(grad(x), p))
    nfev = 1
    for _ in range(max_iter):
        f_new = f(x + alpha * p)
        nfev += 1
        if f_new <= fx + c1 * alpha * grad_dot:
            return LineSearchResult(alpha=alpha, nfev=nfev, njev=1, success=True)
        alpha *= rho
    logger.debug("Armijo backtracking exhausted %d trials", max_iter)
    return LineSearchResult(alpha=alpha, nfev=nfev, njev=1, success=False)


__all__ = ["backtracking_armijo", "wolfe_line_search"]
