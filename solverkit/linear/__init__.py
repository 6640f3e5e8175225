"""Linear solve back end used for Newton directions."""

from .lu import LinearSolver, LUSolver, NumpySolver, make_linear_solver

__all__ = ["LUSolver", "LinearSolver", "NumpySolver", "make_linear_solver"]
