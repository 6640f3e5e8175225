"""Line search problems, method interface and default constants."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from ..base.objectives import UnivariateObjective
from ..config import Options

DEFAULT_ARMIJO_ALPHA0 = 1.0
DEFAULT_ARMIJO_SIGMA0 = 0.1
DEFAULT_ARMIJO_SIGMA1 = 0.5
DEFAULT_ARMIJO_P = 0.5
DEFAULT_WOLFE_C1 = 1e-4
DEFAULT_WOLFE_C2 = 0.9

DEFAULT_BRACKETING_S = 1e-2
DEFAULT_BRACKETING_K = 2.0
DEFAULT_BRACKETING_NMAX = 100

DEFAULT_LINESEARCH_RMAX = 100
MAX_QUADRATIC_ROUNDS = 20


class LinesearchProblem(UnivariateObjective):
    """Restriction ``phi(alpha)`` of an objective to a search direction.

    ``F`` evaluates ``phi`` and ``D`` its derivative ``phi'``; both are
    ordinary univariate callables, so any scalar function can be searched.
    """

    def __init__(self, F: Callable[[float], float], D: Callable[[float], float]) -> None:
        super().__init__(F, D)


class LinesearchMethod(ABC):
    """Parameters of a step length rule.

    Subclasses are immutable; all per-call state lives in :meth:`solve`.
    """

    alpha0: float = DEFAULT_ARMIJO_ALPHA0

    @abstractmethod
    def solve(self, problem: LinesearchProblem, alpha: float, options: Options) -> float:
        """Return a step length, starting the search from ``alpha``."""


__all__ = [
    "DEFAULT_ARMIJO_ALPHA0",
    "DEFAULT_ARMIJO_P",
    "DEFAULT_ARMIJO_SIGMA0",
    "DEFAULT_ARMIJO_SIGMA1",
    "DEFAULT_BRACKETING_K",
    "DEFAULT_BRACKETING_NMAX",
    "DEFAULT_BRACKETING_S",
    "DEFAULT_LINESEARCH_RMAX",
    "DEFAULT_WOLFE_C1",
    "DEFAULT_WOLFE_C2",
    "LinesearchMethod",
    "LinesearchProblem",
    "MAX_QUADRATIC_ROUNDS",
]
