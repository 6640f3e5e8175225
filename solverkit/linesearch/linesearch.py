"""Line search driver with recovery from non-finite trial steps."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..config import Options, resolve_options
from ..exceptions import ConfigurationError, NumericalError
from ..logging import get_logger
from .base import DEFAULT_ARMIJO_SIGMA1, DEFAULT_LINESEARCH_RMAX, LinesearchMethod, LinesearchProblem
from .static import Static

logger = get_logger(__name__)


class Linesearch:
    """Run a :class:`LinesearchMethod` on a :class:`LinesearchProblem`.

    Before the method runs, ``phi`` is probed at the initial step. If the
    value is NaN or infinite, or the function raises ``ValueError``,
    ``OverflowError``, ``ZeroDivisionError`` or ``FloatingPointError``, the
    step is multiplied by ``sigma1`` and probed again, at most ``rmax`` times.

    Example:
        >>> from solverkit.linesearch import Backtracking
        >>> ls = Linesearch(Backtracking())
        >>> problem = LinesearchProblem(lambda a: (a - 0.3) ** 2, lambda a: 2 * (a - 0.3))
        >>> alpha = ls(problem)
    """

    def __init__(
        self,
        method: Optional[LinesearchMethod] = None,
        options: Optional[Options] = None,
        sigma1: float = DEFAULT_ARMIJO_SIGMA1,
        rmax: int = DEFAULT_LINESEARCH_RMAX,
        **option_kwargs: Any,
    ) -> None:
        method = Static() if method is None else method
        if not isinstance(method, LinesearchMethod):
            raise ConfigurationError(f"method must be a LinesearchMethod, got {type(method).__name__}")
        if not (0 < sigma1 < 1):
            raise ConfigurationError("sigma1 must lie in (0, 1)")
        self.method = method
        self.options = resolve_options(options, **option_kwargs)
        self.sigma1 = sigma1
        self.rmax = rmax

    def __call__(self, problem: LinesearchProblem, alpha0: Optional[float] = None) -> float:
        alpha = self.method.alpha0 if alpha0 is None else float(alpha0)
        alpha = self.recover(problem, alpha)
        return self.method.solve(problem, alpha, self.options)

    def recover(self, problem: LinesearchProblem, alpha: float) -> float:
        """Shrink ``alpha`` until ``phi(alpha)`` is finite."""
        for attempt in range(self.rmax + 1):
            try:
                value = problem.value(alpha)
            except ConfigurationError:
                raise
            except (ValueError, OverflowError, ZeroDivisionError, FloatingPointError) as exc:
                logger.warning("Line search hit %s at alpha = %.6e.", type(exc).__name__, alpha)
                value = np.nan
            if np.isfinite(value):
                return alpha
            if attempt == self.rmax:
                break
            logger.warning(
                "Non-finite line search value at alpha = %.6e; decreasing alpha to %.6e and trying again.",
                alpha,
                alpha * self.sigma1,
            )
            alpha *= self.sigma1
        raise NumericalError(f"Line search could not find a finite value after {self.rmax} reductions.")

    def __repr__(self) -> str:
        return f"Linesearch({self.method!r})"


__all__ = ["Linesearch"]
