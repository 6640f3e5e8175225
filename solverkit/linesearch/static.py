"""Fixed step length."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import Options
from .base import DEFAULT_ARMIJO_ALPHA0, LinesearchMethod, LinesearchProblem


@dataclass(frozen=True)
class Static(LinesearchMethod):
    """Always take the step ``alpha``.

    The driver may still shrink ``alpha`` when ``phi(alpha)`` is not finite.
    """

    alpha: float = DEFAULT_ARMIJO_ALPHA0

    @property
    def alpha0(self) -> float:
        return self.alpha

    def solve(self, problem: LinesearchProblem, alpha: float, options: Options) -> float:
        return alpha


__all__ = ["Static"]
