"""Full Newton method with a weak Wolfe line search."""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from ..logging import get_logger
from .core import (
    DEFAULT_MAXITER,
    DEFAULT_TOL,
    Hessian,
    MinimizerBase,
    OptimizeResult,
    Problem,
    SolverConfig,
    check_convergence,
    initial_point,
)
from .linalg import ldl_factor
from .line_search import wolfe_line_search
from .utils import approx_grad, approx_hessian

logger = get_logger(__name__)


def _compute_gradient(problem: Problem, x: np.ndarray) -> tuple[np.ndarray, int, int]:
    if problem.grad is not None:
        return np.asarray(problem.grad(x), dtype=float), 0, 1
    grad, evals = approx_grad(problem.fun, x, return_evals=True)
    return grad, int(evals), 0


def _compute_hessian(
    hess_fun: Optional[Hessian], problem: Problem, x: np.ndarray
) -> tuple[np.ndarray, int, int]:
    if hess_fun is not None:
        return np.asarray(hess_fun(x), dtype=float), 0, 1
    hess, evals = approx_hessian(problem.fun, x, return_evals=True)
    return hess, int(evals), 0


def newton_direction(hess: np.ndarray, grad: np.ndarray) -> np.ndarray:
    """Solve ``hess p = -grad``, falling back to ``-grad`` for non-descent.

    Raises
    ------
    ValueError
        If ``hess`` is not square or does not match ``grad``.
    np.linalg.LinAlgError
        If the LDL^T factorization or the solve fails.
    """
    if hess.ndim != 2 or hess.shape[0] != hess.shape[1]:
        raise ValueError(f"Hessian must be square, got shape {hess.shape}.")
    if hess.shape[0] != grad.size:
        raise ValueError(
            f"Hessian/gradient size mismatch: {hess.shape} vs ({grad.size},)."
        )
    step = ldl_factor(hess).solve(-grad)
    if float(np.dot(step, grad)) >= 0.0:
        logger.debug("Newton step is not a descent direction; using -grad")
        step = -grad
    return step


class Newton(MinimizerBase):
    """Newton's method using an exact Hessian oracle.

    The Hessian is taken from ``hessian`` (or :meth:`set_hessian`), then from
    ``problem.hess``, and approximated by central differences otherwise.
    """

    name = "Newton"

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        hessian: Optional[Hessian] = None,
        line_search: Callable = wolfe_line_search,
    ) -> None:
        super().__init__(config)
        self._hessian = hessian
        self._line_search = line_search

    def set_hessian(self, hessian: Optional[Hessian]) -> None:
        self._hessian = hessian

    def solve(
        self, x0: np.ndarray, problem: Problem, history: bool = False
    ) -> OptimizeResult:
        cfg = self.config
        x = initial_point(x0, problem)
        hess_fun = self._hessian if self._hessian is not None else problem.hess
        hist: list[np.ndarray] = []
        if history:
            hist.append(x.copy())
        nfev = 0
        njev = 0
        nhev = 0
        nit = 0
        success = False
        message = "Maximum iterations reached."

        def grad_for_line_search(point: np.ndarray) -> np.ndarray:
            nonlocal nfev
            g, fe, _ = _compute_gradient(problem, point)
            nfev += fe
            return g

        gradient_callable = problem.grad or grad_for_line_search
        while True:
            grad, grad_fev, grad_jev = _compute_gradient(problem, x)
            nfev += grad_fev
            njev += grad_jev
            grad_norm = float(np.linalg.norm(grad))
            if check_convergence(grad_norm, cfg.tolerance):
                success = True
                message = "Gradient tolerance satisfied."
                break
            if nit >= cfg.max_iterations:
                break
            hess, hess_fev, hess_jev = _compute_hessian(hess_fun, problem, x)
            nfev += hess_fev
            nhev += hess_jev
            step = newton_direction(hess, grad)
            ls = self._line_search(
                problem.fun,
                gradient_callable,
                x,
                step,
                c1=cfg.c1,
                c2=cfg.c2,
                rho=cfg.contraction,
                max_iter=cfg.max_line_search_iterations,
            )
            nfev += ls.nfev
            if problem.grad is not None:
                njev += ls.njev
            x = x + ls.alpha * step
            nit += 1
            if history:
                hist.append(x.copy())
            logger.debug(
                "Newton iter %d: alpha=%.3e grad_norm=%.3e", nit, ls.alpha, grad_norm
            )

        self._iterations = nit
        fx = float(problem.fun(x))
        nfev += 1
        logger.info("Newton finished after %d iterations: %s", nit, message)
        return OptimizeResult(
            x=x,
            fun=fx,
            nit=nit,
            success=success,
            message=message,
            grad_norm=grad_norm,
            nfev=nfev,
            njev=njev,
            nhev=nhev,
            history=hist,
        )


def newton_method(
    problem: Problem,
    x0: np.ndarray,
    maxiter: int = DEFAULT_MAXITER,
    tol: float = DEFAULT_TOL,
    line_search: Callable = wolfe_line_search,
    history: bool = False,
) -> OptimizeResult:
    """Newton's method with a weak Wolfe line search."""
    solver = Newton(
        SolverConfig(max_iterations=maxiter, tolerance=tol),
        line_search=line_search,
    )
    return solver.solve(x0, problem, history=history)


__all__ = ["Newton", "newton_direction", "newton_method"]
