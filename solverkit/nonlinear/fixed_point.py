"""Fixed point (Picard) iteration."""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from ..base.systems import NonlinearSystem
from ..config import Options, resolve_options
from ..core import SolverResult
from ..linesearch import LinesearchMethod, Static
from .nonlinear_solver import NonlinearSolver, check_start


class FixedPointIterator(NonlinearSolver):
    """Iterate ``x <- x - alpha * F(x)`` without a Jacobian.

    For ``F(x) = x - G(x)`` and the default unit step this is the plain
    iteration ``x <- G(x)``. A line search other than
    :class:`~solverkit.linesearch.Static` treats the Jacobian as the
    identity when computing the slope of ``|F|^2``.

    Example:
        >>> it = FixedPointIterator(np.array([1.0]), lambda x: x - np.cos(x))
        >>> res = it.solve()
        >>> bool(abs(res.x[0] - 0.739085) < 1e-6)
        True
    """

    def __init__(
        self,
        x0: np.ndarray,
        F: Callable,
        linesearch: Optional[LinesearchMethod] = None,
        inplace: bool = False,
        params: Optional[Any] = None,
        options: Optional[Options] = None,
        **option_kwargs: Any,
    ) -> None:
        options = resolve_options(options, **option_kwargs)
        x0 = check_start(x0, options.dtype)
        system = NonlinearSystem(F, None, x0.size, inplace=inplace, params=params, dtype=options.dtype)
        super().__init__(x0, system, Static() if linesearch is None else linesearch, options)

    def initialize(self, x: np.ndarray) -> None:
        super().initialize(x)
        self.cache.jacobian[...] = np.eye(self.system.n_in, dtype=self.options.dtype)

    def compute_direction(self, x: np.ndarray) -> None:
        self.cache.direction[...] = self.cache.rhs


def fixed_point_solve(F: Callable, x0: np.ndarray, **kwargs: Any) -> SolverResult:
    """Solve ``F(x) = 0`` by fixed point iteration from ``x0``."""
    return FixedPointIterator(x0, F, **kwargs).solve()


__all__ = ["FixedPointIterator", "fixed_point_solve"]
