"""Quasi-Newton optimization algorithms (BFGS and L-BFGS)."""

from __future__ import annotations

import abc
from typing import Any, Callable, Optional

import numpy as np

from ..logging import get_logger
from .core import (
    DEFAULT_MAXITER,
    DEFAULT_TOL,
    MinimizerBase,
    OptimizeResult,
    Problem,
    SolverConfig,
    check_convergence,
    initial_point,
)
from .history import CurvatureHistory
from .linalg import conjugate_gradient
from .line_search import wolfe_line_search
from .utils import approx_grad

logger = get_logger(__name__)

# Largest relative residual accepted from the BFGS direction solve.
DIRECTION_RTOL = 1e-6


def _compute_gradient(problem: Problem, x: np.ndarray) -> tuple[np.ndarray, int, int]:
    if problem.grad is not None:
        return np.asarray(problem.grad(x), dtype=float), 0, 1
    grad, evals = approx_grad(problem.fun, x, return_evals=True)
    return grad, int(evals), 0


def _curvature_ok(value: float) -> bool:
    return bool(np.isfinite(value)) and value > 0.0


def bfgs_direction(hess_approx: np.ndarray, grad: np.ndarray) -> np.ndarray:
    """Solve ``B p = -grad`` by conjugate gradients.

    Raises
    ------
    np.linalg.LinAlgError
        If ``B`` is found not to be positive definite or the solve does not
        reach :data:`DIRECTION_RTOL`.
    """
    step, info, relres = conjugate_gradient(hess_approx, -grad)
    if info < 0:
        raise np.linalg.LinAlgError(
            "conjugate gradient solver error: Hessian approximation is not positive definite"
        )
    if not np.all(np.isfinite(step)) or relres > DIRECTION_RTOL:
        raise np.linalg.LinAlgError(
            f"conjugate gradient solver error: relative residual {relres:.3e}"
        )
    return step


def bfgs_update(
    hess_approx: np.ndarray, s: np.ndarray, y: np.ndarray, guard: bool = True
) -> np.ndarray:
    """Rank-two BFGS update of a Hessian approximation.

    ``B + y y^T / (y^T s) - (B s)(B s)^T / (s^T B s)``. With ``guard`` the
    update is skipped (``B`` returned unchanged) when either denominator is
    not positive; without it the division is carried out as is.
    """
    bs = hess_approx @ s
    ys = float(np.dot(y, s))
    sbs = float(np.dot(s, bs))
    if not (_curvature_ok(ys) and _curvature_ok(sbs)):
        if guard:
            logger.debug("Skipping BFGS update: y.s=%.3e, s.Bs=%.3e", ys, sbs)
            return hess_approx
        logger.warning("Non-positive curvature in BFGS update: y.s=%.3e", ys)
    with np.errstate(divide="ignore", invalid="ignore"):
        return hess_approx + np.outer(y, y) / ys - np.outer(bs, bs) / sbs


def two_loop_direction(grad: np.ndarray, history: CurvatureHistory) -> np.ndarray:
    """L-BFGS search direction by the two-loop recursion.

    The initial inverse Hessian is ``gamma * I`` with
    ``gamma = (s . y) / (y . y)`` taken from the newest pair. An empty
    history gives the steepest-descent direction.
    """
    if len(history) == 0:
        return -grad
    q = np.array(grad, dtype=float)
    alphas = np.empty(len(history))
    for i in range(len(history) - 1, -1, -1):
        s, y, rho = history[i]
        alphas[i] = rho * float(np.dot(s, q))
        q -= alphas[i] * y
    last = history.newest()
    gamma = float(np.dot(last.s, last.y) / np.dot(last.y, last.y))
    z = gamma * q
    for i, (s, y, rho) in enumerate(history):
        beta = rho * float(np.dot(y, z))
        z += s * (alphas[i] - beta)
    return -z


class _QuasiNewton(MinimizerBase):
    """Outer loop shared by BFGS and L-BFGS.

    Subclasses build their curvature state in ``_start`` and thread it
    through ``_direction`` and ``_update``; nothing of it outlives ``solve``.
    """

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        line_search: Callable = wolfe_line_search,
    ) -> None:
        super().__init__(config)
        self._line_search = line_search

    @abc.abstractmethod
    def _start(self, x: np.ndarray) -> Any:
        """Return fresh curvature state for a solve starting at ``x``."""

    @abc.abstractmethod
    def _direction(self, state: Any, grad: np.ndarray) -> np.ndarray:
        """Return the search direction at gradient ``grad``."""

    @abc.abstractmethod
    def _update(self, state: Any, s: np.ndarray, y: np.ndarray) -> Any:
        """Fold the curvature pair ``(s, y)`` into ``state``."""

    def solve(
        self, x0: np.ndarray, problem: Problem, history: bool = False
    ) -> OptimizeResult:
        cfg = self.config
        x = initial_point(x0, problem)
        hist: list[np.ndarray] = []
        if history:
            hist.append(x.copy())
        nfev = 0
        njev = 0
        nit = 0
        success = False
        message = "Maximum iterations reached."

        def grad_for_line_search(point: np.ndarray) -> np.ndarray:
            nonlocal nfev
            g, fe, _ = _compute_gradient(problem, point)
            nfev += fe
            return g

        gradient_callable = problem.grad or grad_for_line_search
        grad, grad_fev, grad_jev = _compute_gradient(problem, x)
        nfev += grad_fev
        njev += grad_jev
        state = self._start(x)
        while True:
            grad_norm = float(np.linalg.norm(grad))
            if check_convergence(grad_norm, cfg.tolerance):
                success = True
                message = "Gradient tolerance satisfied."
                break
            if nit >= cfg.max_iterations:
                break
            direction = self._direction(state, grad)
            ls = self._line_search(
                problem.fun,
                gradient_callable,
                x,
                direction,
                c1=cfg.c1,
                c2=cfg.c2,
                rho=cfg.contraction,
                max_iter=cfg.max_line_search_iterations,
            )
            nfev += ls.nfev
            if problem.grad is not None:
                njev += ls.njev
            s = ls.alpha * direction
            x_new = x + s
            grad_new, grad_fev, grad_jev = _compute_gradient(problem, x_new)
            nfev += grad_fev
            njev += grad_jev
            state = self._update(state, s, grad_new - grad)
            x = x_new
            grad = grad_new
            nit += 1
            if history:
                hist.append(x.copy())
            logger.debug(
                "%s iter %d: alpha=%.3e grad_norm=%.3e",
                self.name,
                nit,
                ls.alpha,
                grad_norm,
            )

        self._iterations = nit
        fx = float(problem.fun(x))
        nfev += 1
        logger.info("%s finished after %d iterations: %s", self.name, nit, message)
        return OptimizeResult(
            x=x,
            fun=fx,
            nit=nit,
            success=success,
            message=message,
            grad_norm=grad_norm,
            nfev=nfev,
            njev=njev,
            nhev=0,
            history=hist,
        )


class BFGS(_QuasiNewton):
    """Full-memory BFGS on a dense Hessian approximation ``B``.

    ``B`` starts from the matrix given to :meth:`set_initial_hessian`
    (identity when unset) at every ``solve`` call and each search direction
    solves ``B p = -grad`` instead of inverting ``B``.
    """

    name = "BFGS"

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        initial_hessian: Optional[np.ndarray] = None,
        line_search: Callable = wolfe_line_search,
    ) -> None:
        super().__init__(config, line_search=line_search)
        self._initial_hessian: Optional[np.ndarray] = None
        self.set_initial_hessian(initial_hessian)

    def set_initial_hessian(self, matrix: Optional[np.ndarray]) -> None:
        if matrix is None:
            self._initial_hessian = None
            return
        matrix = np.array(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(
                f"Initial Hessian must be square, got shape {matrix.shape}."
            )
        self._initial_hessian = matrix

    def _start(self, x: np.ndarray) -> np.ndarray:
        if self._initial_hessian is None:
            return np.eye(x.size)
        if self._initial_hessian.shape != (x.size, x.size):
            raise ValueError(
                f"Initial Hessian has shape {self._initial_hessian.shape}, "
                f"expected ({x.size}, {x.size})."
            )
        return self._initial_hessian.copy()

    def _direction(self, state: np.ndarray, grad: np.ndarray) -> np.ndarray:
        return bfgs_direction(state, grad)

    def _update(self, state: np.ndarray, s: np.ndarray, y: np.ndarray) -> np.ndarray:
        return bfgs_update(state, s, y, guard=self.config.curvature_guard)


class LBFGS(_QuasiNewton):
    """Limited-memory BFGS keeping the ``config.memory`` newest curvature pairs."""

    name = "L-BFGS"

    def _start(self, x: np.ndarray) -> CurvatureHistory:
        return CurvatureHistory(self.config.memory, x.size)

    def _direction(self, state: CurvatureHistory, grad: np.ndarray) -> np.ndarray:
        return two_loop_direction(grad, state)

    def _update(
        self, state: CurvatureHistory, s: np.ndarray, y: np.ndarray
    ) -> CurvatureHistory:
        ys = float(np.dot(y, s))
        if not _curvature_ok(ys):
            if self.config.curvature_guard:
                logger.debug("Skipping L-BFGS pair: y.s=%.3e", ys)
                return state
            logger.warning("Non-positive curvature in L-BFGS pair: y.s=%.3e", ys)
        state.append(s, y)
        return state


def bfgs(
    problem: Problem,
    x0: np.ndarray,
    maxiter: int = DEFAULT_MAXITER,
    tol: float = DEFAULT_TOL,
    initial_hessian: Optional[np.ndarray] = None,
    line_search: Callable = wolfe_line_search,
    history: bool = False,
) -> OptimizeResult:
    """Full-memory BFGS with weak Wolfe line search."""
    solver = BFGS(
        SolverConfig(max_iterations=maxiter, tolerance=tol),
        initial_hessian=initial_hessian,
        line_search=line_search,
    )
    return solver.solve(x0, problem, history=history)


def lbfgs(
    problem: Problem,
    x0: np.ndarray,
    m: int = 15,
    maxiter: int = DEFAULT_MAXITER,
    tol: float = DEFAULT_TOL,
    line_search: Callable = wolfe_line_search,
    history: bool = False,
) -> OptimizeResult:
    """Limited-memory BFGS using two-loop recursion."""
    solver = LBFGS(
        SolverConfig(max_iterations=maxiter, tolerance=tol, memory=m),
        line_search=line_search,
    )
    return solver.solve(x0, problem, history=history)


__all__ = [
    "BFGS",
    "LBFGS",
    "bfgs",
    "bfgs_direction",
    "bfgs_update",
    "lbfgs",
    "two_loop_direction",
]
