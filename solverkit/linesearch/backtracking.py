"""Backtracking (Armijo) line search."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import Options
from ..exceptions import ConfigurationError
from .base import (
    DEFAULT_ARMIJO_ALPHA0,
    DEFAULT_ARMIJO_P,
    DEFAULT_WOLFE_C1,
    DEFAULT_WOLFE_C2,
    LinesearchMethod,
    LinesearchProblem,
)
from .conditions import CurvatureCondition, SufficientDecreaseCondition


@dataclass(frozen=True)
class Backtracking(LinesearchMethod):
    """Shrink ``alpha`` by ``p`` until ``phi(alpha) < phi(0) + c1 * alpha * phi'(0)``.

    Parameters
    ----------
    alpha0:
        Initial step length.
    c1:
        Sufficient decrease constant in ``(0, 1)``.
    c2:
        Curvature constant, only used with ``wolfe=True``.
    p:
        Shrink factor in ``(0, 1)``.
    wolfe:
        Also require the standard curvature condition
        ``phi'(alpha) >= c2 * phi'(0)``.
    """

    alpha0: float = DEFAULT_ARMIJO_ALPHA0
    c1: float = DEFAULT_WOLFE_C1
    c2: float = DEFAULT_WOLFE_C2
    p: float = DEFAULT_ARMIJO_P
    wolfe: bool = False

    def __post_init__(self) -> None:
        if not (0 < self.c1 < 1):
            raise ConfigurationError("Armijo constant c1 must lie in (0, 1)")
        if not (0 < self.p < 1):
            raise ConfigurationError("Shrink factor p must lie in (0, 1)")
        if self.wolfe and not (self.c1 < self.c2 < 1):
            raise ConfigurationError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")
        if not self.alpha0 > 0:
            raise ConfigurationError("alpha0 must be positive")

    def solve(self, problem: LinesearchProblem, alpha: float, options: Options) -> float:
        f0 = problem.value(0.0)
        d0 = problem.derivative(0.0)
        sdc = SufficientDecreaseCondition(problem, f0, d0, self.c1)
        cc = CurvatureCondition(problem, d0, self.c2) if self.wolfe else None
        for _ in range(options.max_iterations):
            if sdc(alpha) and (cc is None or cc(alpha)):
                break
            alpha *= self.p
        return alpha


__all__ = ["Backtracking"]
