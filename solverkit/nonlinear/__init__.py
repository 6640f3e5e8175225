"""Solvers for square nonlinear systems ``F(x) = 0``."""

from .cache import NewtonSolverCache
from .fixed_point import FixedPointIterator, fixed_point_solve
from .newton_solver import DEFAULT_ITERATIONS_QUASI_NEWTON_SOLVER, NewtonSolver, QuasiNewtonSolver, newton_solve
from .nonlinear_solver import NonlinearSolver
from .status import NonlinearSolverStatus

__all__ = [
    "DEFAULT_ITERATIONS_QUASI_NEWTON_SOLVER",
    "FixedPointIterator",
    "NewtonSolver",
    "NewtonSolverCache",
    "NonlinearSolver",
    "NonlinearSolverStatus",
    "QuasiNewtonSolver",
    "fixed_point_solve",
    "newton_solve",
]
