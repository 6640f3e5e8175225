"""solverkit - Newton-type optimizers, nonlinear solvers and line searches on NumPy arrays."""

__version__ = "0.1.0"

# Derivative providers and cached objectives
from .base import (
    Gradient,
    Hessian,
    Jacobian,
    MultivariateObjective,
    NonlinearSystem,
    UnivariateObjective,
    check_gradient,
    check_hessian,
    check_jacobian,
    gradient,
    hessian,
    jacobian,
    make_gradient,
    make_hessian,
    make_jacobian,
)

# Options and results
from .config import Options
from .core import OptimizeResult, SolverResult, Status
from .exceptions import ConfigurationError, NumericalError, SingularMatrixError

# Linear solvers
from .linear import LinearSolver, LUSolver, NumpySolver

# Line searches
from .linesearch import (
    Backtracking,
    BierlaireQuadratic,
    Bisection,
    Linesearch,
    LinesearchProblem,
    Quadratic,
    Static,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Nonlinear solvers
from .nonlinear import FixedPointIterator, NewtonSolver, QuasiNewtonSolver, fixed_point_solve, newton_solve

# Optimizers
from .optimization import BFGS, DFP, Newton, Optimizer, bfgs, dfp, minimize, newton_method

__all__ = [
    "__version__",
    # Derivatives
    "Gradient",
    "Hessian",
    "Jacobian",
    "MultivariateObjective",
    "NonlinearSystem",
    "UnivariateObjective",
    "check_gradient",
    "check_hessian",
    "check_jacobian",
    "gradient",
    "hessian",
    "jacobian",
    "make_gradient",
    "make_hessian",
    "make_jacobian",
    # Options and results
    "ConfigurationError",
    "NumericalError",
    "OptimizeResult",
    "Options",
    "SingularMatrixError",
    "SolverResult",
    "Status",
    # Linear solvers
    "LUSolver",
    "LinearSolver",
    "NumpySolver",
    # Line searches
    "Backtracking",
    "BierlaireQuadratic",
    "Bisection",
    "Linesearch",
    "LinesearchProblem",
    "Quadratic",
    "Static",
    # Logging
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Nonlinear solvers
    "FixedPointIterator",
    "NewtonSolver",
    "QuasiNewtonSolver",
    "fixed_point_solve",
    "newton_solve",
    # Optimizers
    "BFGS",
    "DFP",
    "Newton",
    "Optimizer",
    "bfgs",
    "dfp",
    "minimize",
    "newton_method",
]
