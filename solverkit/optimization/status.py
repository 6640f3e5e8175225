"""Residuals and convergence flags of an optimization run."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..config import Options
from ..core import Status
from ..exceptions import NumericalError
from ..logging import get_logger
from ..utils import all_finite, l2norm

logger = get_logger(__name__)


def _ratio(num: float, den: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(num) / np.float64(den))


class OptimizerStatus:
    """Bookkeeping between two accepted iterates.

    Residuals (NaN until the first :meth:`update`):

    * ``rx_abs = |x - x_prev|``, ``rx_rel = rx_abs / |x|``
    * ``rf_abs = |f - f_prev|``, ``rf_rel = rf_abs / |f|``
    * ``rg_abs = |g - g_prev|``, ``rg = |g|``
    * ``df = f - f_prev`` and its first order prediction
      ``df_approx = g_prev . (x - x_prev)``
    """

    def __init__(self, dim: int, dtype: Any = np.float64) -> None:
        self.x_prev = np.empty(dim, dtype=dtype)
        self.g_prev = np.empty(dim, dtype=dtype)
        self.clear()

    def clear(self) -> None:
        self.i = 0
        self.rx_abs = np.nan
        self.rx_rel = np.nan
        self.rf_abs = np.nan
        self.rf_rel = np.nan
        self.rg_abs = np.nan
        self.rg = np.nan
        self.df = np.nan
        self.df_approx = np.nan
        self.x_converged = False
        self.f_converged = False
        self.g_converged = False
        self.f_increased = False
        self.x_isnan = False
        self.f_isnan = False
        self.g_isnan = False
        self.f_prev = np.nan
        self.x_prev.fill(np.nan)
        self.g_prev.fill(np.nan)

    def initialize(self, x: np.ndarray, f: float, g: np.ndarray) -> None:
        self.clear()
        self.x_prev[...] = x
        self.f_prev = float(f)
        self.g_prev[...] = g
        self.rg = l2norm(g)
        self._check_finite(x, f, g)

    def increase_iteration_number(self) -> int:
        self.i += 1
        return self.i

    def update(self, x: np.ndarray, f: float, g: np.ndarray) -> None:
        """Compute the residuals of the accepted iterate ``x`` and shift it to previous."""
        f = float(f)
        dx = x - self.x_prev
        self.rx_abs = l2norm(dx)
        self.rx_rel = _ratio(self.rx_abs, l2norm(x))
        self.df = f - self.f_prev
        self.rf_abs = abs(self.df)
        self.rf_rel = _ratio(self.rf_abs, abs(f))
        self.rg_abs = l2norm(g - self.g_prev)
        self.rg = l2norm(g)
        self.df_approx = float(np.dot(self.g_prev, dx))
        self.f_increased = f > self.f_prev
        self._check_finite(x, f, g)
        self.x_prev[...] = x
        self.f_prev = f
        self.g_prev[...] = g

    def _check_finite(self, x: np.ndarray, f: float, g: np.ndarray) -> None:
        self.x_isnan = not all_finite(x)
        self.f_isnan = not all_finite(f)
        self.g_isnan = not all_finite(g)

    @property
    def converged(self) -> bool:
        return self.x_converged or self.f_converged or self.g_converged

    def assess_convergence(self, options: Options) -> bool:
        """Set the convergence flags from the residuals; same status, same answer."""
        self.x_converged = self.rx_abs <= options.x_abstol or self.rx_rel <= options.x_reltol
        f_converged = self.rf_abs <= options.f_abstol or self.rf_rel <= options.f_reltol
        f_decreased_enough = self.df <= options.f_mindec * self.df_approx
        self.f_converged = bool(f_converged and f_decreased_enough)
        self.g_converged = self.rg <= options.g_restol
        return self.converged

    def exceeds_break(self, options: Options) -> bool:
        return (
            self.rx_abs > options.x_abstol_break
            or self.rx_rel > options.x_reltol_break
            or self.rf_abs > options.f_abstol_break
            or self.rf_rel > options.f_reltol_break
            or self.rg > options.g_restol_break
        )

    def raise_if_nonfinite(self) -> None:
        if self.x_isnan or self.f_isnan or self.g_isnan:
            raise NumericalError(
                f"Non-finite iterate at iteration {self.i}: "
                f"x_isnan={self.x_isnan}, f_isnan={self.f_isnan}, g_isnan={self.g_isnan}"
            )

    def meets_stopping_criteria(self, options: Options) -> bool:
        """True if the iteration should stop.

        Raises:
            NumericalError: If ``x``, ``f`` or ``g`` is not finite.
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
            message = f"Optimizer took {self.i} iterations."
            logger.warning(message)
            return message
        return None

    def residuals(self) -> dict[str, float]:
        return {
            "rx_abs": self.rx_abs,
            "rx_rel": self.rx_rel,
            "rf_abs": self.rf_abs,
            "rf_rel": self.rf_rel,
            "rg_abs": self.rg_abs,
            "rg": self.rg,
            "df": self.df,
            "df_approx": self.df_approx,
        }

    def summary(self) -> str:
        return (
            f"i={self.i:4d}  |dx|={self.rx_abs:.2e}  |dx|/|x|={self.rx_rel:.2e}  "
            f"|df|={self.rf_abs:.2e}  |df|/|f|={self.rf_rel:.2e}  |g|={self.rg:.2e}"
        )

    def __str__(self) -> str:
        return "\n".join(
            [
                " * Iterations",
                f"    n = {self.i}",
                " * Convergence measures",
                f"    |x - x'|               = {self.rx_abs:.2e}",
                f"    |x - x'|/|x'|          = {self.rx_rel:.2e}",
                f"    |f(x) - f(x')|         = {self.rf_abs:.2e}",
                f"    |f(x) - f(x')|/|f(x')| = {self.rf_rel:.2e}",
                f"    |g(x) - g(x')|         = {self.rg_abs:.2e}",
                f"    |g(x)|                 = {self.rg:.2e}",
            ]
        )


__all__ = ["OptimizerStatus"]
