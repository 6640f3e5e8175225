"""Per-iteration buffers of the Newton-type optimizers."""

from __future__ import annotations

from typing import Any

import numpy as np

from ..base.objectives import MultivariateObjective
from ..linesearch import LinesearchProblem
from ..utils import compute_new_iterate
from .hessians import HessianApproximation


class NewtonOptimizerCache:
    """Previous iterate, search direction, gradient and right-hand side.

    ``x`` doubles as scratch space while a line search evaluates trial
    points ``x_prev + alpha * direction``. After :meth:`update` the
    direction satisfies ``H direction = rhs = -g``.
    """

    def __init__(self, dim: int, dtype: Any = np.float64) -> None:
        self.x_prev = np.empty(dim, dtype=dtype)
        self.x = np.empty(dim, dtype=dtype)
        self.direction = np.empty(dim, dtype=dtype)
        self.g = np.empty(dim, dtype=dtype)
        self.rhs = np.empty(dim, dtype=dtype)
        self.clear()

    def clear(self) -> None:
        for buf in (self.x_prev, self.x, self.direction, self.g, self.rhs):
            buf.fill(np.nan)
        self.valid = False

    def update(self, x: np.ndarray, g: np.ndarray, hessian: HessianApproximation) -> np.ndarray:
        """Store ``x`` and ``g`` and compute the direction from ``hessian``."""
        self.x_prev[...] = x
        self.x[...] = x
        self.g[...] = g
        np.negative(self.g, out=self.rhs)
        hessian.solve(self.rhs, out=self.direction)
        self.valid = True
        return self.direction

    def linesearch_problem(self, objective: MultivariateObjective) -> LinesearchProblem:
        """``phi(a) = f(x_prev + a d)`` and ``phi'(a) = grad f(x_prev + a d) . d``."""

        def phi(alpha: float) -> float:
            compute_new_iterate(self.x_prev, alpha, self.direction, out=self.x)
            return objective.update_value(self.x)

        def dphi(alpha: float) -> float:
            compute_new_iterate(self.x_prev, alpha, self.direction, out=self.x)
            return float(np.dot(objective.update_gradient(self.x), self.direction))

        return LinesearchProblem(phi, dphi)


__all__ = ["NewtonOptimizerCache"]
