"""Three-point quadratic interpolation (Bierlaire, Optimization: Principles and Algorithms, 11.2.1)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from ..config import Options, default_precision
from ..logging import get_logger
from .base import MAX_QUADRATIC_ROUNDS, LinesearchMethod, LinesearchProblem
from .bracketing import find_decrease, triple_point_finder

logger = get_logger(__name__)


def shift_to_avoid_stalling(chi: float, a: float, b: float, c: float, eps: float) -> float:
    """Move ``chi`` by ``eps / 2`` towards the wider half of ``[a, c]``."""
    if (c - b) > (b - a):
        return chi + eps / 2
    return chi - eps / 2


@dataclass(frozen=True)
class BierlaireQuadratic(LinesearchMethod):
    """Bracket a minimum with three points and refine it by interpolation.

    Returns ``0`` straight away when ``|phi'(0)| < xi``. Otherwise iterates
    the minimizer of the parabola through ``(a, b, c)`` at most
    ``MAX_QUADRATIC_ROUNDS`` times, until ``c - a <= eps`` or both
    ``phi(a) - phi(b)`` and ``phi(c) - phi(b)`` are at most ``eps``.
    ``eps`` and ``xi`` default to ``default_precision`` of ``dtype``.

    Near a minimum with a nonzero value, ``phi(alpha + delta)`` can round to
    ``phi(alpha)`` for every trial step while ``|phi'(alpha)|`` is still above
    ``xi``. No bracket exists then, and ``alpha`` itself is returned, leaving
    the iterate unchanged for the driver's convergence check.
    """

    eps: Optional[float] = None
    xi: Optional[float] = None
    dtype: Any = np.float64
    alpha0: float = 0.0

    def __post_init__(self) -> None:
        if self.eps is None:
            object.__setattr__(self, "eps", default_precision(self.dtype))
        if self.xi is None:
            object.__setattr__(self, "xi", default_precision(self.dtype))

    def solve(self, problem: LinesearchProblem, alpha: float, options: Options) -> float:
        if abs(problem.derivative(alpha)) < self.xi:
            return alpha
        f = problem.value
        delta = find_decrease(f, alpha)
        if delta is None:
            if options.verbosity >= 2:
                logger.warning("No decrease along the search direction at alpha = %.6e.", alpha)
            return alpha
        a, b, c = triple_point_finder(f, alpha, delta)
        fa, fb, fc = f(a), f(b), f(c)
        for _ in range(MAX_QUADRATIC_ROUNDS):
            denom = fa * (b - c) + fb * (c - a) + fc * (a - b)
            if denom == 0:
                break
            chi = 0.5 * (fa * (b**2 - c**2) + fb * (c**2 - a**2) + fc * (a**2 - b**2)) / denom
            if chi == b:
                chi = shift_to_avoid_stalling(chi, a, b, c, self.eps)
            fchi = f(chi)
            if chi > b:
                if fchi > fb:
                    c, fc = chi, fchi
                else:
                    a, fa, b, fb = b, fb, chi, fchi
            else:
                if fchi > fb:
                    a, fa = chi, fchi
                else:
                    c, fc, b, fb = b, fb, chi, fchi
            if (c - a) <= self.eps or ((fa - fb) <= self.eps and (fc - fb) <= self.eps):
                break
        else:
            if options.verbosity >= 2:
                logger.warning("Maximum number of quadratic line search rounds reached.")
        return b


__all__ = ["BierlaireQuadratic", "shift_to_avoid_stalling"]
