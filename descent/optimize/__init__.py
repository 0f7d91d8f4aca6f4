"""Newton, BFGS and L-BFGS minimizers sharing a weak Wolfe line search.

Example
-------
>>> import numpy as np
>>> from descent.optimize import Problem, bfgs
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> def rosen_grad(x):
...     return np.array([
...         -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
...         200 * (x[1] - x[0] ** 2),
...     ])
>>> problem = Problem(fun=rosen, grad=rosen_grad, dim=2)
>>> res = bfgs(problem, np.array([-1.2, 1.0]))
>>> round(res.fun, 6)
0.0
"""

from .core import (
    DEFAULT_MAXITER,
    DEFAULT_TOL,
    LineSearchResult,
    MinimizerBase,
    OptimizeResult,
    Problem,
    SolverConfig,
    check_convergence,
)
from .history import CurvatureHistory, CurvaturePair
from .line_search import backtracking_armijo, wolfe_line_search
from .linalg import LDLFactorization, conjugate_gradient, ldl_factor
from .newton import Newton, newton_direction, newton_method
from .quasi_newton import (
    BFGS,
    LBFGS,
    bfgs,
    bfgs_direction,
    bfgs_update,
    lbfgs,
    two_loop_direction,
)
from .utils import approx_grad, approx_hessian, check_grad

__all__ = [
    "BFGS",
    "CurvatureHistory",
    "CurvaturePair",
    "DEFAULT_MAXITER",
    "DEFAULT_TOL",
    "LBFGS",
    "LDLFactorization",
    "LineSearchResult",
    "MinimizerBase",
    "Newton",
    "OptimizeResult",
    "Problem",
    "SolverConfig",
    "approx_grad",
    "approx_hessian",
    "backtracking_armijo",
    "bfgs",
    "bfgs_direction",
    "bfgs_update",
    "check_convergence",
    "check_grad",
    "conjugate_gradient",
    "ldl_factor",
    "lbfgs",
    "newton_direction",
    "newton_method",
    "two_loop_direction",
    "wolfe_line_search",
]
