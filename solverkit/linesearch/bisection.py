"""Bisection on the derivative of the line search problem."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import Options
from .base import DEFAULT_ARMIJO_ALPHA0, LinesearchMethod, LinesearchProblem

MAX_BRACKET_EXPANSIONS = 60


@dataclass(frozen=True)
class Bisection(LinesearchMethod):
    """Find a stationary point of ``phi`` in ``[0, alpha]``.

    An endpoint is accepted directly when ``|phi'| <= f_abstol`` there. While
    ``phi'`` is still negative at the upper end, the bracket is shifted up
    and doubled. The bracket is then halved on the sign of ``phi'`` until
    ``|phi'| <= f_abstol``, its width is at most ``x_abstol`` or
    ``max_iterations`` is reached.
    """

    alpha0: float = DEFAULT_ARMIJO_ALPHA0

    def solve(self, problem: LinesearchProblem, alpha: float, options: Options) -> float:
        tol = options.f_abstol
        a, b = 0.0, alpha
        da = problem.derivative(a)
        if abs(da) <= tol:
            return a
        db = problem.derivative(b)
        if abs(db) <= tol:
            return b

        for _ in range(MAX_BRACKET_EXPANSIONS):
            if db * da > 0:
                a, da = b, db
                b = 2 * b
                db = problem.derivative(b)
                if abs(db) <= tol:
                    return b
            else:
                break

        c = b
        for _ in range(options.max_iterations):
            c = 0.5 * (a + b)
            if c <= a or c >= b:
                break
            dc = problem.derivative(c)
            if abs(dc) <= tol:
                break
            if da * dc > 0:
                a, da = c, dc
            else:
                b = c
            if b - a <= options.x_abstol:
                break
        return c


__all__ = ["Bisection", "MAX_BRACKET_EXPANSIONS"]
