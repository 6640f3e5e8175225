"""Jacobian providers for vector functions ``F: R^n -> R^m``.

Every provider accepts an optional ``params`` object that is passed through
to the user function as a trailing argument.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import numpy as np
from torch import func as torch_func

from ..exceptions import ConfigurationError
from .hessian import matrix_report
from .providers import (
    DEFAULT_MODE,
    as_tensor,
    call_autodiff,
    check_input,
    check_mode,
    default_step,
    detect_inplace,
    store,
    to_numpy,
    torch_dtype,
    with_params,
)


class Jacobian(ABC):
    """In-place Jacobian functor ``provider(out, x) -> out`` with ``out`` of shape ``(m, n)``."""

    def __init__(self, n_in: int, n_out: Optional[int] = None, dtype: Any = np.float64) -> None:
        n_out = n_in if n_out is None else n_out
        if n_in < 1 or n_out < 1:
            raise ConfigurationError(f"dimensions must be positive, got n_in={n_in}, n_out={n_out}")
        self.n_in = int(n_in)
        self.n_out = int(n_out)
        self.dtype = np.dtype(dtype)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.n_out, self.n_in)

    @abstractmethod
    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        """Write the Jacobian at ``x`` into ``out``."""

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        out = np.empty(self.shape, dtype=self.dtype)
        return self(out, x)


class JacobianFunction(Jacobian):
    """Wraps ``jac(out, x[, params])`` or ``jac(x[, params]) -> J``."""

    def __init__(
        self,
        jac: Callable,
        n_in: int,
        n_out: Optional[int] = None,
        params: Optional[Any] = None,
        dtype: Any = np.float64,
    ) -> None:
        super().__init__(n_in, n_out, dtype)
        self.jac = jac
        self.params = params
        self.inplace = detect_inplace(jac, 1 if params is None else 2, "jacobian")
        self._jac = with_params(jac, params)

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.n_in)
        if self.inplace:
            self._jac(out, x)
            return out
        return store(out, self._jac(x), "jacobian")


class JacobianAutodiff(Jacobian):
    """Forward mode Jacobian built once with :func:`torch.func.jacfwd`.

    Only out-of-place functions can be traced.
    """

    def __init__(
        self,
        F: Callable,
        n_in: int,
        n_out: Optional[int] = None,
        params: Optional[Any] = None,
        dtype: Any = np.float64,
    ) -> None:
        super().__init__(n_in, n_out, dtype)
        self.F = F
        self.params = params
        self._torch_dtype = torch_dtype(self.dtype)
        self._jacobian = torch_func.jacfwd(with_params(F, params))

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.n_in)
        J = to_numpy(call_autodiff(self._jacobian, as_tensor(x, self._torch_dtype)))
        if J.size != out.size:
            raise ConfigurationError(f"function output has {J.size // self.n_in} entries, expected {self.n_out}")
        out[...] = J.reshape(self.shape)
        return out


class JacobianFiniteDifferences(Jacobian):
    """Central differences, column by column, on preallocated buffers."""

    def __init__(
        self,
        F: Callable,
        n_in: int,
        n_out: Optional[int] = None,
        eps: Optional[float] = None,
        inplace: bool = False,
        params: Optional[Any] = None,
        dtype: Any = np.float64,
    ) -> None:
        super().__init__(n_in, n_out, dtype)
        self.F = F
        self.params = params
        self.inplace = inplace
        self.eps = default_step(self.dtype) if eps is None else float(eps)
        if not self.eps > 0:
            raise ConfigurationError("eps must be positive")
        self._F = with_params(F, params)
        self.e = np.zeros(self.n_in, dtype=self.dtype)
        self.tx = np.zeros(self.n_in, dtype=self.dtype)
        self.f1 = np.zeros(self.n_out, dtype=self.dtype)
        self.f2 = np.zeros(self.n_out, dtype=self.dtype)

    def _eval(self, out: np.ndarray, x: np.ndarray) -> None:
        if self.inplace:
            self._F(out, x)
        else:
            store(out, self._F(x), "function")

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.n_in)
        for j in range(self.n_in):
            eps_j = self.eps * x[j] + self.eps
            if eps_j == 0:
                eps_j = self.eps
            self.e.fill(0)
            self.e[j] = eps_j
            np.add(x, self.e, out=self.tx)
            self._eval(self.f1, self.tx)
            np.subtract(x, self.e, out=self.tx)
            self._eval(self.f2, self.tx)
            out[:, j] = (self.f1 - self.f2) / (2 * eps_j)
        return out


def make_jacobian(
    F: Callable,
    n_in: int,
    n_out: Optional[int] = None,
    jac: Optional[Callable] = None,
    mode: str = DEFAULT_MODE,
    eps: Optional[float] = None,
    inplace: bool = False,
    params: Optional[Any] = None,
    dtype: Any = np.float64,
) -> Jacobian:
    """Select a Jacobian provider; a user ``jac`` takes precedence over ``mode``."""
    check_mode(mode)
    if jac is not None:
        return JacobianFunction(jac, n_in, n_out, params=params, dtype=dtype)
    if mode == "function":
        raise ConfigurationError("mode='function' requires a user supplied Jacobian.")
    if mode == "autodiff":
        if inplace:
            raise ConfigurationError("Automatic differentiation needs an out-of-place function F(x).")
        return JacobianAutodiff(F, n_in, n_out, params=params, dtype=dtype)
    return JacobianFiniteDifferences(F, n_in, n_out, eps=eps, inplace=inplace, params=params, dtype=dtype)


def jacobian(x: np.ndarray, jac: Jacobian) -> np.ndarray:
    """Allocate a buffer and evaluate ``jac`` at ``x``."""
    return jac.evaluate(x)


def check_jacobian(J: np.ndarray) -> dict[str, float]:
    """Extrema of a Jacobian, plus condition number and determinant when square."""
    return matrix_report(J, "jacobian")


__all__ = [
    "Jacobian",
    "JacobianAutodiff",
    "JacobianFiniteDifferences",
    "JacobianFunction",
    "check_jacobian",
    "jacobian",
    "make_jacobian",
]
