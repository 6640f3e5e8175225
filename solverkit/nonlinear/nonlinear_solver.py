"""Iteration driver shared by the solvers for ``F(x) = 0``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from ..base.systems import NonlinearSystem
from ..config import Options
from ..core import MESSAGES, SolverResult, Status
from ..exceptions import ConfigurationError
from ..linesearch import Linesearch, LinesearchMethod
from ..logging import get_logger
from ..utils import compute_new_iterate, l2norm
from .cache import NewtonSolverCache
from .status import NonlinearSolverStatus

logger = get_logger(__name__)


def check_start(x0: Any, dtype: Any) -> np.ndarray:
    x0 = np.array(x0, dtype=dtype)
    if x0.ndim == 0:
        x0 = x0.reshape(1)
    if x0.ndim != 1 or x0.size == 0:
        raise ConfigurationError(f"x0 must be a non-empty 1D array, got shape {x0.shape}")
    return x0


class NonlinearSolver(ABC):
    """Line search iteration ``x <- x + alpha * d`` on ``|F(x)|^2``.

    Subclasses fill ``cache.direction`` (and ``cache.jacobian``, used for the
    slope of the line search) in :meth:`compute_direction`.
    """

    def __init__(self, x0: np.ndarray, system: NonlinearSystem, linesearch: LinesearchMethod, options: Options) -> None:
        self.options = options
        self.x0 = x0
        self.system = system
        self.linesearch = Linesearch(linesearch, options)
        self.cache = NewtonSolverCache(system.n_in, options.dtype)
        self.status = NonlinearSolverStatus(system.n_in, options.dtype)
        self.history: list[np.ndarray] = []

    @property
    def iteration_number(self) -> int:
        return self.status.i

    @abstractmethod
    def compute_direction(self, x: np.ndarray) -> None:
        """Write the search direction at ``x`` into ``cache.direction``."""

    def initialize(self, x: np.ndarray) -> None:
        self.system.clear()
        self.cache.clear()
        self.history = []
        y = self.system.force_value(x)
        self.status.initialize(x, y)
        self.status.raise_if_nonfinite()
        if self.options.store_trace:
            self.history.append(x.copy())

    def solver_step(self, x: np.ndarray) -> float:
        """Compute a direction at ``x``, search along it and overwrite ``x``."""
        self.cache.update(x, self.system.update_value(x))
        self.compute_direction(x)
        alpha = self.linesearch(self.cache.linesearch_problem(self.system))
        compute_new_iterate(self.cache.x_prev, alpha, self.cache.direction, out=x)
        return alpha

    def update(self, x: np.ndarray) -> None:
        self.status.update(x, self.system.update_value(x))

    def call_limit_reached(self) -> bool:
        o, system = self.options, self.system
        return (o.f_calls_limit > 0 and system.f_calls >= o.f_calls_limit) or (
            o.g_calls_limit > 0 and system.j_calls >= o.g_calls_limit
        )

    def solve(self, x: Optional[np.ndarray] = None) -> SolverResult:
        """Iterate from ``x`` (default ``x0``) until a stopping criterion holds.

        ``f_calls_limit`` bounds evaluations of ``F`` and ``g_calls_limit``
        evaluations of the Jacobian. A float array of the configured dtype
        is updated in place.

        Raises:
            NumericalError: If ``x`` or ``F(x)`` becomes non-finite.
            SingularMatrixError: If the Jacobian cannot be factorized.
        """
        if x is None:
            x = self.x0.copy()
        elif not (isinstance(x, np.ndarray) and x.dtype == self.options.dtype and x.shape == self.x0.shape):
            x = check_start(x, self.options.dtype)
            if x.shape != self.x0.shape:
                raise ConfigurationError(f"x has shape {x.shape}, expected {self.x0.shape}")

        options = self.options
        self.initialize(x)
        code: Optional[Status] = None
        while self.status.i == 0 or not self.status.meets_stopping_criteria(options):
            if self.call_limit_reached():
                code = Status.CALL_LIMIT
                break
            self.status.increase_iteration_number()
            self.solver_step(x)
            self.update(x)
            if options.store_trace:
                self.history.append(x.copy())
            if options.verbosity >= 2:
                logger.info(self.status.summary())
        if code is None:
            code = self.status.termination_status(options)
        self.status.warn_iteration_number(options)

        y = self.system.update_value(x)
        success = code is Status.CONVERGED
        message = MESSAGES[code]
        if options.verbosity >= 1:
            log = logger.info if success else logger.warning
            log("%s after %d iterations, |F(x)| = %.6e", message, self.status.i, l2norm(y))

        return SolverResult(
            x=x.copy(),
            fun=y.copy(),
            nit=self.status.i,
            success=success,
            status=code,
            message=message,
            residual=l2norm(y),
            nfev=self.system.f_calls,
            njev=self.system.j_calls,
            history=self.history,
            residuals=self.status.residuals(),
        )


__all__ = ["NonlinearSolver", "check_start"]
