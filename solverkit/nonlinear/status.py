"""Residuals and convergence flags of a nonlinear solve ``F(x) = 0``."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..config import Options
from ..core import Status
from ..exceptions import NumericalError
from ..logging import get_logger
from ..utils import all_finite, l2norm

logger = get_logger(__name__)


class NonlinearSolverStatus:
    """Residuals between two accepted iterates.

    * ``rx_abs = |delta|``, ``rx_rel = |delta| / |x|``, ``rx_suc = |delta / x|``
      with ``delta = x - x_prev`` and the quotient taken componentwise,
    * ``rf_abs = |f|``, ``rf_rel = |f| / |f_0|``, ``rf_suc = |f - f_prev|``.
    """

    def __init__(self, n: int, dtype: Any = np.float64) -> None:
        self.x_prev = np.empty(n, dtype=dtype)
        self.f_prev = np.empty(n, dtype=dtype)
        self.clear()

    def clear(self) -> None:
        self.i = 0
        self.rx_abs = np.nan
        self.rx_rel = np.nan
        self.rx_suc = np.nan
        self.rf_abs = np.nan
        self.rf_rel = np.nan
        self.rf_suc = np.nan
        self.f0_norm = np.nan
        self.x_converged = False
        self.f_converged = False
        self.f_increased = False
        self.x_isnan = False
        self.f_isnan = False
        self.x_prev.fill(np.nan)
        self.f_prev.fill(np.nan)

    def initialize(self, x: np.ndarray, f: np.ndarray) -> None:
        self.clear()
        self.x_prev[...] = x
        self.f_prev[...] = f
        self.f0_norm = l2norm(f)
        self.rf_abs = self.f0_norm
        self.x_isnan = not all_finite(x)
        self.f_isnan = not all_finite(f)

    def increase_iteration_number(self) -> int:
        self.i += 1
        return self.i

    def update(self, x: np.ndarray, f: np.ndarray) -> None:
        delta = x - self.x_prev
        f_norm = l2norm(f)
        with np.errstate(divide="ignore", invalid="ignore"):
            self.rx_abs = l2norm(delta)
            self.rx_rel = float(np.float64(self.rx_abs) / np.float64(l2norm(x)))
            self.rx_suc = l2norm(delta / x)
            self.rf_abs = f_norm
            self.rf_rel = float(np.float64(f_norm) / np.float64(self.f0_norm))
        self.rf_suc = l2norm(f - self.f_prev)
        self.f_increased = f_norm > l2norm(self.f_prev)
        self.x_isnan = not all_finite(x)
        self.f_isnan = not all_finite(f)
        self.x_prev[...] = x
        self.f_prev[...] = f

    @property
    def converged(self) -> bool:
        return self.x_converged or self.f_converged

    def assess_convergence(self, options: Options) -> bool:
        self.x_converged = (
            self.rx_abs <= options.x_abstol
            or self.rx_rel <= options.x_reltol
            or self.rx_suc <= options.x_suctol
        )
        self.f_converged = (
            self.rf_abs <= options.f_abstol
            or self.rf_rel <= options.f_reltol
            or self.rf_suc <= options.f_suctol
        )
        return self.converged

    def exceeds_break(self, options: Options) -> bool:
        return (
            self.rx_abs > options.x_abstol_break
            or self.rx_rel > options.x_reltol_break
            or self.rf_abs > options.f_abstol_break
            or self.rf_rel > options.f_reltol_break
        )

    def raise_if_nonfinite(self) -> None:
        if self.x_isnan or self.f_isnan:
            raise NumericalError(
                f"Non-finite iterate at iteration {self.i}: x_isnan={self.x_isnan}, f_isnan={self.f_isnan}"
            )

    def meets_stopping_criteria(self, options: Options) -> bool:
        """True if the iteration should stop.

        Raises:
            NumericalError: If ``x`` or ``F(x)`` is not finite.
        """
        self.raise_if_nonfinite()
        converged = self.assess_convergence(options)
        return (
            (converged and self.i >= options.min_iterations)
            or (self.f_increased and not options.allow_f_increases)
            or self.i >= options.max_iterations
            or self.exceeds_break(options)
        )

    def termination_status(self, options: Options) -> Status:
        if self.assess_convergence(options) and self.i >= options.min_iterations:
            return Status.CONVERGED
        if self.f_increased and not options.allow_f_increases:
            return Status.F_INCREASED
        if self.exceeds_break(options):
            return Status.BREAK
        return Status.MAX_ITER

    def warn_iteration_number(self, options: Options) -> Optional[str]:
        if options.warn_iterations > 0 and self.i >= options.warn_iterations:
            message = f"Solver took {self.i} iterations."
            logger.warning(message)
            return message
        return None

    def residuals(self) -> dict[str, float]:
        return {
            "rx_abs": self.rx_abs,
            "rx_rel": self.rx_rel,
            "rx_suc": self.rx_suc,
            "rf_abs": self.rf_abs,
            "rf_rel": self.rf_rel,
            "rf_suc": self.rf_suc,
        }

    def summary(self) -> str:
        return (
            f"i={self.i:4d}  rx_abs={self.rx_abs:.8e}  rx_rel={self.rx_rel:.8e}  "
            f"rf_abs={self.rf_abs:.8e}  rf_rel={self.rf_rel:.8e}"
        )

    def __str__(self) -> str:
        return self.summary()


__all__ = ["NonlinearSolverStatus"]
