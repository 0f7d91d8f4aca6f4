"""descent - Newton, BFGS and L-BFGS minimizers for smooth objectives."""

__version__ = "0.1.0"

from .logging import configure_logging, get_logger, set_log_level
from .optimize import (
    BFGS,
    LBFGS,
    MinimizerBase,
    Newton,
    OptimizeResult,
    Problem,
    SolverConfig,
    bfgs,
    lbfgs,
    newton_method,
    wolfe_line_search,
)
from .suite import SuiteRecord, format_report, run_suite

__all__ = [
    "BFGS",
    "LBFGS",
    "MinimizerBase",
    "Newton",
    "OptimizeResult",
    "Problem",
    "SolverConfig",
    "SuiteRecord",
    "__version__",
    "bfgs",
    "configure_logging",
    "format_report",
    "get_logger",
    "lbfgs",
    "newton_method",
    "run_suite",
    "set_log_level",
    "wolfe_line_search",
]
