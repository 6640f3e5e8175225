"""Wolfe conditions on a line search problem ``phi``."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import ConfigurationError
from .base import DEFAULT_WOLFE_C1, DEFAULT_WOLFE_C2, LinesearchProblem

CURVATURE_MODES = ("standard", "strong")


@dataclass(frozen=True)
class SufficientDecreaseCondition:
    """Armijo condition ``phi(alpha) < phi(0) + c1 * alpha * phi'(0)``."""

    problem: LinesearchProblem
    f0: float
    d0: float
    c1: float = DEFAULT_WOLFE_C1

    def __post_init__(self) -> None:
        if not (0 < self.c1 < 1):
            raise ConfigurationError("Sufficient decrease constant c1 must lie in (0, 1)")

    def __call__(self, alpha: float) -> bool:
        return self.problem.value(alpha) < self.f0 + self.c1 * alpha * self.d0


@dataclass(frozen=True)
class CurvatureCondition:
    """Second Wolfe condition.

    ``"standard"``: ``phi'(alpha) >= c2 * phi'(0)``;
    ``"strong"``: ``|phi'(alpha)| <= c2 * |phi'(0)|``.
    """

    problem: LinesearchProblem
    d0: float
    c2: float = DEFAULT_WOLFE_C2
    mode: str = "standard"

    def __post_init__(self) -> None:
        if not (0 < self.c2 < 1):
            raise ConfigurationError("Curvature constant c2 must lie in (0, 1)")
        if self.mode not in CURVATURE_MODES:
            raise ConfigurationError(f"mode must be one of {', '.join(CURVATURE_MODES)}, got {self.mode!r}")

    def __call__(self, alpha: float) -> bool:
        d = self.problem.derivative(alpha)
        if self.mode == "strong":
            return abs(d) <= self.c2 * abs(self.d0)
        return d >= self.c2 * self.d0


__all__ = ["CURVATURE_MODES", "CurvatureCondition", "SufficientDecreaseCondition"]
