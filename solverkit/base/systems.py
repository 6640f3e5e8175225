"""Memoizing wrapper around a vector function ``F: R^n -> R^m``."""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from ..exceptions import ConfigurationError
from .jacobian import Jacobian
from .objectives import AbstractObjective, _same_point
from .providers import check_input, store, with_params


class NonlinearSystem(AbstractObjective):
    """Vector function with a Jacobian provider, cached like the objectives.

    Args:
        F: ``F(x[, params]) -> y`` or, with ``inplace=True``,
            ``F(y, x[, params])`` writing into ``y``.
        jacobian: a :class:`~solverkit.base.jacobian.Jacobian` provider, or
            ``None`` for solvers that never need one.
        n_in: input dimension.
        n_out: output dimension, defaults to ``n_in``.
        inplace: whether ``F`` writes its output.
        params: opaque object passed as the last argument of ``F``.
    """

    def __init__(
        self,
        F: Callable,
        jacobian: Optional[Jacobian],
        n_in: int,
        n_out: Optional[int] = None,
        inplace: bool = False,
        params: Optional[Any] = None,
        dtype: Any = np.float64,
    ) -> None:
        n_out = n_in if n_out is None else n_out
        if n_in < 1 or n_out < 1:
            raise ConfigurationError(f"dimensions must be positive, got n_in={n_in}, n_out={n_out}")
        if jacobian is not None:
            if not isinstance(jacobian, Jacobian):
                raise ConfigurationError(f"jacobian must be a Jacobian provider, got {type(jacobian).__name__}")
            if jacobian.shape != (n_out, n_in):
                raise ConfigurationError(f"jacobian has shape {jacobian.shape}, expected {(n_out, n_in)}")
        self.F = F
        self.jacobian_provider = jacobian
        self.n_in = int(n_in)
        self.n_out = int(n_out)
        self.inplace = inplace
        self.params = params
        self.dtype = np.dtype(dtype)
        self._F = with_params(F, params)
        self.y = np.empty(self.n_out, dtype=self.dtype)
        self.j = np.empty((self.n_out, self.n_in), dtype=self.dtype)
        self.x_f = np.empty(self.n_in, dtype=self.dtype)
        self.x_j = np.empty(self.n_in, dtype=self.dtype)
        self.clear()

    def clear(self) -> None:
        for buf in (self.y, self.j, self.x_f, self.x_j):
            buf.fill(np.nan)
        self.f_valid = False
        self.j_valid = False
        self.f_calls = 0
        self.j_calls = 0

    def _evaluate(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.n_in)
        self.f_calls += 1
        if self.inplace:
            self._F(out, x)
            return out
        return store(out, self._F(x), "function")

    def value(self, x: np.ndarray) -> np.ndarray:
        return self._evaluate(np.empty(self.n_out, dtype=self.dtype), x)

    def force_value(self, x: np.ndarray) -> np.ndarray:
        self._evaluate(self.y, x)
        self.x_f[...] = x
        self.f_valid = True
        return self.y

    def update_value(self, x: np.ndarray) -> np.ndarray:
        if not self.f_valid or not _same_point(x, self.x_f):
            return self.force_value(x)
        return self.y

    def _require_jacobian(self) -> Jacobian:
        if self.jacobian_provider is None:
            raise ConfigurationError("This system was constructed without a Jacobian provider.")
        return self.jacobian_provider

    def jacobian(self, x: np.ndarray) -> np.ndarray:
        provider = self._require_jacobian()
        self.j_calls += 1
        return provider.evaluate(x)

    def force_jacobian(self, x: np.ndarray) -> np.ndarray:
        provider = self._require_jacobian()
        self.j_calls += 1
        provider(self.j, x)
        self.x_j[...] = x
        self.j_valid = True
        return self.j

    def update_jacobian(self, x: np.ndarray) -> np.ndarray:
        if not self.j_valid or not _same_point(x, self.x_j):
            return self.force_jacobian(x)
        return self.j


__all__ = ["NonlinearSystem"]
