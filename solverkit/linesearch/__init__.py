"""Step length control for the Newton-type iterations.

Example
-------
>>> from solverkit.linesearch import Backtracking, Linesearch, LinesearchProblem
>>> problem = LinesearchProblem(lambda a: (a - 0.3) ** 2, lambda a: 2 * (a - 0.3))
>>> alpha = Linesearch(Backtracking())(problem)
"""

from .backtracking import Backtracking
from .base import (
    DEFAULT_ARMIJO_ALPHA0,
    DEFAULT_ARMIJO_P,
    DEFAULT_ARMIJO_SIGMA0,
    DEFAULT_ARMIJO_SIGMA1,
    DEFAULT_WOLFE_C1,
    DEFAULT_WOLFE_C2,
    LinesearchMethod,
    LinesearchProblem,
)
from .bierlaire import BierlaireQuadratic
from .bisection import Bisection
from .bracketing import bisection, bracket_minimum, bracket_root, find_decrease, triple_point_finder
from .conditions import CurvatureCondition, SufficientDecreaseCondition
from .linesearch import Linesearch
from .quadratic import Quadratic
from .static import Static

__all__ = [
    "Backtracking",
    "BierlaireQuadratic",
    "Bisection",
    "CurvatureCondition",
    "DEFAULT_ARMIJO_ALPHA0",
    "DEFAULT_ARMIJO_P",
    "DEFAULT_ARMIJO_SIGMA0",
    "DEFAULT_ARMIJO_SIGMA1",
    "DEFAULT_WOLFE_C1",
    "DEFAULT_WOLFE_C2",
    "Linesearch",
    "LinesearchMethod",
    "LinesearchProblem",
    "Quadratic",
    "Static",
    "SufficientDecreaseCondition",
    "bisection",
    "bracket_minimum",
    "bracket_root",
    "find_decrease",
    "triple_point_finder",
]
