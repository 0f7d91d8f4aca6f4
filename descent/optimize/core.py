"""Core interfaces shared across the unconstrained minimizers."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]
Hessian = Callable[[Array], Array]

DEFAULT_TOL = 1e-10
DEFAULT_MAXITER = 1000


def _is_count(value) -> bool:
    return (
        isinstance(value, (int, np.integer))
        and not isinstance(value, bool)
        and value >= 1
    )


@dataclass(frozen=True)
class Problem:
    """Oracle set describing an optimization problem.

    ``fun`` is required. ``grad`` and ``hess`` fall back to central
    differences when omitted. ``dim``, when given, is checked against the
    initial guess.
    """

    fun: Objective
    grad: Optional[Gradient] = None
    hess: Optional[Hessian] = None
    dim: Optional[int] = None


@dataclass(frozen=True)
class SolverConfig:
    """Stopping rule and line-search constants of a minimizer.

    Attributes:
        max_iterations: Cap on outer iterations performed by ``solve``.
        tolerance: Gradient-norm threshold; ``solve`` stops once
            ``||grad(x)|| <= tolerance``.
        c1: Sufficient-decrease (Armijo) constant.
        c2: Curvature constant of the weak Wolfe conditions.
        contraction: Factor ``rho`` used to shrink the step inside a bracket.
        max_line_search_iterations: Trial steps allowed per line search.
        memory: Number of curvature pairs kept by L-BFGS.
        curvature_guard: Skip quasi-Newton updates whose curvature ``y.s``
            is not positive.
    """

    max_iterations: int = DEFAULT_MAXITER
    tolerance: float = DEFAULT_TOL
    c1: float = 1e-4
    c2: float = 0.9
    contraction: float = 0.5
    max_line_search_iterations: int = 50
    memory: int = 15
    curvature_guard: bool = True

    def __post_init__(self) -> None:
        """Validate SolverConfig invariants."""
        if not _is_count(self.max_iterations):
            raise ValueError(
                f"max_iterations must be an integer >= 1, got {self.max_iterations}."
            )
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}.")
        if not (0 < self.c1 < self.c2 < 1):
            raise ValueError(
                f"Require 0 < c1 < c2 < 1, got c1={self.c1}, c2={self.c2}."
            )
        if not (0 < self.contraction < 1):
            raise ValueError(
                f"contraction must lie in (0, 1), got {self.contraction}."
            )
        if not _is_count(self.max_line_search_iterations):
            raise ValueError(
                "max_line_search_iterations must be an integer >= 1, "
                f"got {self.max_line_search_iterations}."
            )
        if not _is_count(self.memory):
            raise ValueError(f"memory must be an integer >= 1, got {self.memory}.")


@dataclass(frozen=True)
class LineSearchResult:
    """Step length returned by a line search.

    ``success`` is False when the iteration cap was exhausted and ``alpha``
    is only the last trial step.
    """

    alpha: float
    nfev: int
    njev: int
    success: bool


@dataclass
class OptimizeResult:
    """Standard result object returned by all minimizers in this module."""

    x: Array
    fun: float
    nit: int
    success: bool
    message: str
    grad_norm: float
    nfev: int
    njev: int
    nhev: int
    history: List[Array] = field(default_factory=list)


def check_convergence(grad_norm: float, tol: float) -> bool:
    """Return True if gradient norm satisfies tolerance."""
    return grad_norm <= tol


class MinimizerBase(abc.ABC):
    """Configuration and bookkeeping shared by Newton, BFGS and L-BFGS.

    The instance owns a :class:`SolverConfig` and the iteration count of the
    last ``solve`` call. Everything else lives inside ``solve``, so one
    instance must not run two overlapping solves.
    """

    name = "minimizer"

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        self._config = config if config is not None else SolverConfig()
        self._iterations = 0

    @property
    def config(self) -> SolverConfig:
        return self._config

    @property
    def iterations(self) -> int:
        """Iterations performed by the last ``solve`` call."""
        return self._iterations

    @property
    def tolerance(self) -> float:
        return self._config.tolerance

    def set_max_iterations(self, max_iterations: int) -> None:
        self._config = replace(self._config, max_iterations=max_iterations)

    def set_tolerance(self, tol: float) -> None:
        self._config = replace(self._config, tolerance=tol)

    def configure(self, **changes) -> None:
        """Replace any subset of :class:`SolverConfig` fields."""
        self._config = replace(self._config, **changes)

    @abc.abstractmethod
    def solve(
        self, x0: Array, problem: Problem, history: bool = False
    ) -> OptimizeResult:
        """Minimize ``problem`` starting from ``x0``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self._config!r})"


def initial_point(x0: Array, problem: Problem) -> Array:
    """Copy ``x0`` into a float vector and check it against ``problem.dim``."""
    x = np.array(x0, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"x0 must be a 1D array, got shape {x.shape}.")
    if problem.dim is not None and x.size != problem.dim:
        raise ValueError(
            f"x0 has dimension {x.size} but the problem expects {problem.dim}."
        )
    return x


__all__ = [
    "Array",
    "Objective",
    "Gradient",
    "Hessian",
    "Problem",
    "SolverConfig",
    "LineSearchResult",
    "OptimizeResult",
    "MinimizerBase",
    "check_convergence",
    "initial_point",
    "DEFAULT_TOL",
    "DEFAULT_MAXITER",
]
