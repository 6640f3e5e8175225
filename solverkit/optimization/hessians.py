"""Hessian approximations driving the Newton direction ``H delta = -g``.

:class:`ExactHessian` evaluates the objective's Hessian provider and solves
with a factorization. :class:`HessianBFGS` and :class:`HessianDFP` maintain
an approximation ``Q`` of the *inverse* Hessian from successive iterates and
gradients, so their :meth:`solve` is a matrix-vector product.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..base.objectives import MultivariateObjective
from ..exceptions import ConfigurationError
from ..linear import LinearSolver, make_linear_solver
from ..utils import outer


class HessianApproximation(ABC):
    """Interface used by the optimizer: ``initialize``, ``update``, ``solve``."""

    def __init__(self, objective: MultivariateObjective) -> None:
        self.objective = objective
        self.dim = objective.dim
        self.dtype = objective.dtype

    @abstractmethod
    def initialize(self, x: np.ndarray) -> None:
        """Reset the approximation at the starting point ``x``."""

    @abstractmethod
    def update(self, x: np.ndarray) -> None:
        """Refresh the approximation at the new iterate ``x``."""

    @abstractmethod
    def solve(self, rhs: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Return the direction ``delta`` with ``H delta = rhs``."""


class ExactHessian(HessianApproximation):
    """Hessian from the objective's provider, factorized on every update."""

    def __init__(self, objective: MultivariateObjective, linear_solver: str | LinearSolver = "lu") -> None:
        super().__init__(objective)
        if objective.hessian_provider is None:
            raise ConfigurationError("ExactHessian needs an objective with a Hessian provider.")
        self.linear_solver = make_linear_solver(linear_solver)

    @property
    def H(self) -> np.ndarray:
        return self.objective.h

    def initialize(self, x: np.ndarray) -> None:
        self.update(x)

    def update(self, x: np.ndarray) -> None:
        self.linear_solver.factorize(self.objective.update_hessian(x))

    def solve(self, rhs: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        return self.linear_solver.solve(rhs, out)


class IterativeHessian(HessianApproximation):
    """Secant update of an inverse Hessian approximation ``Q``.

    ``x_prev``/``x`` and ``g_prev``/``g`` hold the last two iterates and
    gradients, ``delta = x - x_prev`` and ``gamma = g - g_prev``. The
    update is skipped when its denominators vanish, leaving ``Q`` bitwise
    unchanged; ``updates`` and ``skipped`` count both outcomes.
    """

    def __init__(self, objective: MultivariateObjective) -> None:
        super().__init__(objective)
        n, dtype = self.dim, self.dtype
        self.x_prev = np.full(n, np.nan, dtype=dtype)
        self.x = np.full(n, np.nan, dtype=dtype)
        self.delta = np.full(n, np.nan, dtype=dtype)
        self.g_prev = np.full(n, np.nan, dtype=dtype)
        self.g = np.full(n, np.nan, dtype=dtype)
        self.gamma = np.full(n, np.nan, dtype=dtype)
        self.Q = np.eye(n, dtype=dtype)
        self.Qgamma = np.zeros(n, dtype=dtype)
        self.T1 = np.zeros((n, n), dtype=dtype)
        self.T2 = np.zeros((n, n), dtype=dtype)
        self.T3 = np.zeros((n, n), dtype=dtype)
        self.updates = 0
        self.skipped = 0

    @property
    def inverse_hessian(self) -> np.ndarray:
        return self.Q

    def initialize(self, x: np.ndarray) -> None:
        self.Q[...] = np.eye(self.dim, dtype=self.dtype)
        for buf in (self.x_prev, self.g_prev, self.delta, self.gamma):
            buf.fill(np.nan)
        self.x[...] = x
        self.g[...] = self.objective.update_gradient(x)
        self.updates = 0
        self.skipped = 0

    def update(self, x: np.ndarray) -> None:
        self.x_prev[...] = self.x
        self.g_prev[...] = self.g
        self.x[...] = x
        self.g[...] = self.objective.update_gradient(x)
        np.subtract(self.x, self.x_prev, out=self.delta)
        np.subtract(self.g, self.g_prev, out=self.gamma)
        if self._apply():
            self.updates += 1
        else:
            self.skipped += 1

    @abstractmethod
    def _apply(self) -> bool:
        """Apply the rank-two update to ``Q``; return False if skipped."""

    def solve(self, rhs: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        if out is None:
            return self.Q @ rhs
        np.matmul(self.Q, rhs, out=out)
        return out


class HessianBFGS(IterativeHessian):
    """Broyden-Fletcher-Goldfarb-Shanno update of the inverse Hessian.

    ``Q -= (delta gamma^T Q + Q gamma delta^T - (1 + gamma^T Q gamma / delta.gamma) delta delta^T) / delta.gamma``
    """

    def _apply(self) -> bool:
        dg = float(np.dot(self.delta, self.gamma))
        if dg == 0 or not np.isfinite(dg):
            return False
        np.matmul(self.Q, self.gamma, out=self.Qgamma)
        gQg = float(np.dot(self.gamma, self.Qgamma))
        outer(self.T1, self.delta, self.gamma @ self.Q)
        outer(self.T2, self.Qgamma, self.delta)
        outer(self.T3, self.delta, self.delta)
        self.T3 *= 1 + gQg / dg
        self.T1 += self.T2
        self.T1 -= self.T3
        self.T1 /= dg
        self.Q -= self.T1
        return True


class HessianDFP(IterativeHessian):
    """Davidon-Fletcher-Powell update of the inverse Hessian.

    ``Q -= Q gamma gamma^T Q / (gamma^T Q gamma)``, then
    ``Q += delta delta^T / delta.gamma``.
    """

    def _apply(self) -> bool:
        dg = float(np.dot(self.delta, self.gamma))
        np.matmul(self.Q, self.gamma, out=self.Qgamma)
        gQg = float(np.dot(self.gamma, self.Qgamma))
        if dg == 0 or gQg == 0 or not np.isfinite(dg) or not np.isfinite(gQg):
            return False
        outer(self.T1, self.Qgamma, self.gamma @ self.Q)
        self.T1 /= gQg
        outer(self.T2, self.delta, self.delta)
        self.T2 /= dg
        self.Q -= self.T1
        self.Q += self.T2
        return True


__all__ = [
    "ExactHessian",
    "HessianApproximation",
    "HessianBFGS",
    "HessianDFP",
    "IterativeHessian",
]
