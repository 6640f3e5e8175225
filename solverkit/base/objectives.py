"""Memoizing wrappers around scalar objectives.

Each cached quantity ``q`` is available through three methods:

``q(x)``
    evaluate and count, leaving the cache untouched;
``force_q(x)``
    evaluate, count and store the result together with its argument;
``update_q(x)``
    call ``force_q(x)`` only if ``x`` differs from the stored argument,
    otherwise return the stored result without evaluating.

Whether a quantity has been evaluated is tracked by an explicit validity
flag. Caches are filled with NaN on construction and on :meth:`clear` only to
make accidental reads easy to spot.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Callable, Optional

import numpy as np

from ..exceptions import ConfigurationError
from .gradient import Gradient
from .hessian import Hessian


def _scalar(value: Any) -> float:
    return float(value)


def _same_point(x: np.ndarray, cached: np.ndarray) -> bool:
    return np.shape(x) == cached.shape and bool(np.array_equal(x, cached))


class AbstractObjective(ABC):
    """Common interface; calling the objective evaluates its value."""

    def __call__(self, x):
        return self.value(x)

    def value(self, x):
        raise NotImplementedError(f"{type(self).__name__} does not implement value()")

    def force_value(self, x):
        raise NotImplementedError(f"{type(self).__name__} does not implement force_value()")

    def update_value(self, x):
        raise NotImplementedError(f"{type(self).__name__} does not implement update_value()")

    def clear(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not implement clear()")


class UnivariateObjective(AbstractObjective):
    """Scalar function ``F(x)`` of a scalar together with its derivative ``D(x)``."""

    def __init__(self, F: Callable[[float], float], D: Callable[[float], float]) -> None:
        self.F = F
        self.D = D
        self.clear()

    def clear(self) -> None:
        self.f = np.nan
        self.d = np.nan
        self.x_f = np.nan
        self.x_d = np.nan
        self.f_valid = False
        self.d_valid = False
        self.f_calls = 0
        self.d_calls = 0

    def value(self, x: float) -> float:
        self.f_calls += 1
        return _scalar(self.F(x))

    def force_value(self, x: float) -> float:
        self.f = self.value(x)
        self.x_f = x
        self.f_valid = True
        return self.f

    def update_value(self, x: float) -> float:
        if not self.f_valid or x != self.x_f:
            return self.force_value(x)
        return self.f

    def derivative(self, x: float) -> float:
        self.d_calls += 1
        return _scalar(self.D(x))

    def force_derivative(self, x: float) -> float:
        self.d = self.derivative(x)
        self.x_d = x
        self.d_valid = True
        return self.d

    def update_derivative(self, x: float) -> float:
        if not self.d_valid or x != self.x_d:
            return self.force_derivative(x)
        return self.d


class MultivariateObjective(AbstractObjective):
    """Scalar objective ``F: R^n -> R`` with gradient and optional Hessian providers.

    Args:
        F: objective, called with a 1D array.
        gradient: a :class:`~solverkit.base.gradient.Gradient` provider; it
            fixes the dimension and dtype of the caches.
        hessian: optional :class:`~solverkit.base.hessian.Hessian` provider.
    """

    def __init__(self, F: Callable, gradient: Gradient, hessian: Optional[Hessian] = None) -> None:
        if not isinstance(gradient, Gradient):
            raise ConfigurationError(f"gradient must be a Gradient provider, got {type(gradient).__name__}")
        if hessian is not None:
            if not isinstance(hessian, Hessian):
                raise ConfigurationError(f"hessian must be a Hessian provider, got {type(hessian).__name__}")
            if hessian.dim != gradient.dim:
                raise ConfigurationError(f"hessian has dim {hessian.dim}, gradient has dim {gradient.dim}")
        self.F = F
        self.gradient_provider = gradient
        self.hessian_provider = hessian
        self.dim = gradient.dim
        self.dtype = gradient.dtype
        self.g = np.empty(self.dim, dtype=self.dtype)
        self.h = np.empty((self.dim, self.dim), dtype=self.dtype)
        self.x_f = np.empty(self.dim, dtype=self.dtype)
        self.x_g = np.empty(self.dim, dtype=self.dtype)
        self.x_h = np.empty(self.dim, dtype=self.dtype)
        self.clear()

    def clear(self) -> None:
        self.f = np.nan
        for buf in (self.g, self.h, self.x_f, self.x_g, self.x_h):
            buf.fill(np.nan)
        self.f_valid = False
        self.g_valid = False
        self.h_valid = False
        self.f_calls = 0
        self.g_calls = 0
        self.h_calls = 0

    def value(self, x: np.ndarray) -> float:
        self.f_calls += 1
        return _scalar(self.F(x))

    def force_value(self, x: np.ndarray) -> float:
        self.f = self.value(x)
        self.x_f[...] = x
        self.f_valid = True
        return self.f

    def update_value(self, x: np.ndarray) -> float:
        if not self.f_valid or not _same_point(x, self.x_f):
            return self.force_value(x)
        return self.f

    def gradient(self, x: np.ndarray) -> np.ndarray:
        self.g_calls += 1
        return self.gradient_provider.evaluate(x)

    def force_gradient(self, x: np.ndarray) -> np.ndarray:
        self.g_calls += 1
        self.gradient_provider(self.g, x)
        self.x_g[...] = x
        self.g_valid = True
        return self.g

    def update_gradient(self, x: np.ndarray) -> np.ndarray:
        if not self.g_valid or not _same_point(x, self.x_g):
            return self.force_gradient(x)
        return self.g

    def _require_hessian(self) -> Hessian:
        if self.hessian_provider is None:
            raise ConfigurationError("This objective was constructed without a Hessian provider.")
        return self.hessian_provider

    def hessian(self, x: np.ndarray) -> np.ndarray:
        provider = self._require_hessian()
        self.h_calls += 1
        return provider.evaluate(x)

    def force_hessian(self, x: np.ndarray) -> np.ndarray:
        provider = self._require_hessian()
        self.h_calls += 1
        provider(self.h, x)
        self.x_h[...] = x
        self.h_valid = True
        return self.h

    def update_hessian(self, x: np.ndarray) -> np.ndarray:
        if not self.h_valid or not _same_point(x, self.x_h):
            return self.force_hessian(x)
        return self.h


__all__ = ["AbstractObjective", "MultivariateObjective", "UnivariateObjective"]
