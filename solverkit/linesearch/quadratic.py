"""Safeguarded quadratic interpolation (Kelley, Iterative Methods for Linear and Nonlinear Equations)."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import Options
from ..exceptions import ConfigurationError
from .base import (
    DEFAULT_ARMIJO_ALPHA0,
    DEFAULT_ARMIJO_SIGMA0,
    DEFAULT_ARMIJO_SIGMA1,
    DEFAULT_WOLFE_C1,
    LinesearchMethod,
    LinesearchProblem,
)


@dataclass(frozen=True)
class Quadratic(LinesearchMethod):
    """Replace a rejected step by the minimizer of a quadratic model.

    While the sufficient decrease condition fails at ``alpha``, fit
    ``p(a) = phi(0) + phi'(0) a + p2 a^2`` through ``phi(alpha)`` and move to
    its minimizer, clamped to ``[sigma0 * alpha, sigma1 * alpha]``. A fit
    without positive curvature falls back to ``sigma1 * alpha``. Once
    ``alpha ** 2`` underflows the fit is degenerate and the current
    ``alpha`` is returned, so a direction along which ``phi`` cannot
    decrease (a zero direction, or rounding near a nonzero minimum) yields
    a vanishing step.

    Note:
        Combined with BFGS in single precision this search can stall; use
        :class:`~solverkit.linesearch.Backtracking` there.
    """

    alpha0: float = DEFAULT_ARMIJO_ALPHA0
    sigma0: float = DEFAULT_ARMIJO_SIGMA0
    sigma1: float = DEFAULT_ARMIJO_SIGMA1
    c1: float = DEFAULT_WOLFE_C1

    def __post_init__(self) -> None:
        if not (0 < self.sigma0 <= self.sigma1 < 1):
            raise ConfigurationError("Require 0 < sigma0 <= sigma1 < 1.")
        if not (0 < self.c1 < 1):
            raise ConfigurationError("Armijo constant c1 must lie in (0, 1)")

    def solve(self, problem: LinesearchProblem, alpha: float, options: Options) -> float:
        p0 = problem.value(0.0)
        p1 = problem.derivative(0.0)
        for _ in range(options.max_iterations):
            y1 = problem.value(alpha)
            if y1 < p0 + self.c1 * alpha * p1:
                break
            alpha_sq = alpha * alpha
            if alpha_sq == 0:
                break
            p2 = (y1 - p0 - p1 * alpha) / alpha_sq
            if not np.isfinite(p2) or p2 <= 0:
                alpha = self.sigma1 * alpha
                continue
            alpha_t = -p1 / (2 * p2)
            alpha = min(max(alpha_t, self.sigma0 * alpha), self.sigma1 * alpha)
        return alpha


__all__ = ["Quadratic"]
