"""Per-iteration buffers of the nonlinear solvers."""

from __future__ import annotations

from typing import Any

import numpy as np

from ..base.systems import NonlinearSystem
from ..linesearch import LinesearchProblem
from ..utils import compute_new_iterate, squared_norm


class NewtonSolverCache:
    """Previous iterate, direction, residual ``y = F(x)`` and the last Jacobian.

    ``rhs = -y`` and ``jacobian direction = rhs`` after a Newton update;
    ``x`` is scratch space for line search trial points.
    """

    def __init__(self, n: int, dtype: Any = np.float64) -> None:
        self.x_prev = np.empty(n, dtype=dtype)
        self.x = np.empty(n, dtype=dtype)
        self.direction = np.empty(n, dtype=dtype)
        self.y = np.empty(n, dtype=dtype)
        self.rhs = np.empty(n, dtype=dtype)
        self.jacobian = np.empty((n, n), dtype=dtype)
        self.Jd = np.empty(n, dtype=dtype)
        self.clear()

    def clear(self) -> None:
        for buf in (self.x_prev, self.x, self.direction, self.y, self.rhs, self.jacobian):
            buf.fill(np.nan)

    def update(self, x: np.ndarray, y: np.ndarray) -> None:
        self.x_prev[...] = x
        self.x[...] = x
        self.y[...] = y
        np.negative(self.y, out=self.rhs)

    def linesearch_problem(self, system: NonlinearSystem) -> LinesearchProblem:
        """``phi(a) = |F(x_prev + a d)|^2`` and ``phi'(a) = 2 F(x_prev + a d) . (J d)``.

        ``J`` is the cached Jacobian, i.e. the one the direction was computed
        with.
        """

        def phi(alpha: float) -> float:
            compute_new_iterate(self.x_prev, alpha, self.direction, out=self.x)
            return squared_norm(system.update_value(self.x))

        def dphi(alpha: float) -> float:
            compute_new_iterate(self.x_prev, alpha, self.direction, out=self.x)
            np.matmul(self.jacobian, self.direction, out=self.Jd)
            return 2.0 * float(np.dot(system.update_value(self.x), self.Jd))

        return LinesearchProblem(phi, dphi)


__all__ = ["NewtonSolverCache"]
