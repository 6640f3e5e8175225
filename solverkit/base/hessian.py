"""Hessian providers for scalar objectives ``F: R^n -> R``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import numpy as np
from torch import func as torch_func

from ..config import machine_epsilon
from ..exceptions import ConfigurationError
from ..logging import get_logger
from ..utils import is_pos_def, symmetrize
from .gradient import Gradient, GradientFiniteDifferences
from .providers import (
    DEFAULT_MODE,
    as_tensor,
    call_autodiff,
    check_input,
    check_mode,
    detect_inplace,
    store,
    to_numpy,
    torch_dtype,
)

logger = get_logger(__name__)


class Hessian(ABC):
    """In-place Hessian functor ``provider(out, x) -> out``."""

    def __init__(self, dim: int, dtype: Any = np.float64) -> None:
        if dim < 1:
            raise ConfigurationError(f"dim must be positive, got {dim}")
        self.dim = int(dim)
        self.dtype = np.dtype(dtype)

    @abstractmethod
    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        """Write the Hessian at ``x`` into ``out``."""

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        out = np.empty((self.dim, self.dim), dtype=self.dtype)
        return self(out, x)


class HessianFunction(Hessian):
    """Wraps a user Hessian, either ``hess(out, x)`` or ``hess(x) -> H``."""

    def __init__(self, hess: Callable, dim: int, dtype: Any = np.float64) -> None:
        super().__init__(dim, dtype)
        self.hess = hess
        self.inplace = detect_inplace(hess, 1, "hessian")

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.dim)
        if self.inplace:
            self.hess(out, x)
            return out
        return store(out, self.hess(x), "hessian")


class HessianAutodiff(Hessian):
    """Hessian built once with :func:`torch.func.hessian`."""

    def __init__(self, F: Callable, dim: int, dtype: Any = np.float64) -> None:
        super().__init__(dim, dtype)
        self.F = F
        self._torch_dtype = torch_dtype(self.dtype)
        self._hessian = torch_func.hessian(F)

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.dim)
        h = call_autodiff(self._hessian, as_tensor(x, self._torch_dtype))
        out[...] = to_numpy(h).reshape(self.dim, self.dim)
        return out


class HessianFiniteDifferences(Hessian):
    """Central differences of a gradient provider, symmetrized.

    Without an explicit ``gradient`` the gradient itself is approximated by
    finite differences, so the default step is ``eps ** (1/4)`` of the
    machine epsilon rather than the square root used for gradients.
    """

    def __init__(
        self,
        F: Callable,
        dim: int,
        gradient: Optional[Gradient] = None,
        eps: Optional[float] = None,
        dtype: Any = np.float64,
    ) -> None:
        super().__init__(dim, dtype)
        self.F = F
        self.eps = machine_epsilon(self.dtype) ** 0.25 if eps is None else float(eps)
        if not self.eps > 0:
            raise ConfigurationError("eps must be positive")
        if gradient is None:
            gradient = GradientFiniteDifferences(F, dim, eps=self.eps, dtype=self.dtype)
        elif gradient.dim != self.dim:
            raise ConfigurationError(f"gradient has dim {gradient.dim}, expected {self.dim}")
        self.gradient = gradient
        self.e = np.zeros(self.dim, dtype=self.dtype)
        self.tx = np.zeros(self.dim, dtype=self.dtype)
        self.g1 = np.zeros(self.dim, dtype=self.dtype)
        self.g2 = np.zeros(self.dim, dtype=self.dtype)

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.dim)
        for j in range(self.dim):
            eps_j = self.eps * x[j] + self.eps
            if eps_j == 0:
                eps_j = self.eps
            self.e.fill(0)
            self.e[j] = eps_j
            np.add(x, self.e, out=self.tx)
            self.gradient(self.g1, self.tx)
            np.subtract(x, self.e, out=self.tx)
            self.gradient(self.g2, self.tx)
            out[:, j] = (self.g1 - self.g2) / (2 * eps_j)
        out[...] = symmetrize(out)
        return out


def make_hessian(
    F: Callable,
    dim: int,
    hess: Optional[Callable] = None,
    mode: str = DEFAULT_MODE,
    gradient: Optional[Gradient] = None,
    eps: Optional[float] = None,
    dtype: Any = np.float64,
) -> Hessian:
    """Select a Hessian provider; a user ``hess`` takes precedence over ``mode``.

    ``gradient`` is only used by the finite difference variant.
    """
    check_mode(mode)
    if hess is not None:
        return HessianFunction(hess, dim, dtype)
    if mode == "function":
        raise ConfigurationError("mode='function' requires a user supplied Hessian.")
    if mode == "autodiff":
        return HessianAutodiff(F, dim, dtype)
    return HessianFiniteDifferences(F, dim, gradient=gradient, eps=eps, dtype=dtype)


def hessian(x: np.ndarray, hes: Hessian) -> np.ndarray:
    """Allocate a buffer and evaluate ``hes`` at ``x``."""
    return hes.evaluate(x)


def matrix_report(M: np.ndarray, name: str) -> dict[str, float]:
    M = np.asarray(M)
    report = {
        "min_abs": float(np.min(np.abs(M))),
        "max_abs": float(np.max(np.abs(M))),
    }
    if M.ndim == 2 and M.shape[0] == M.shape[1]:
        report["cond"] = float(np.linalg.cond(M))
        report["det"] = float(np.linalg.det(M))
        logger.info("condition number of %s: %.6e", name, report["cond"])
        logger.info("determinant of %s: %.6e", name, report["det"])
    logger.info("min|%s| = %.6e, max|%s| = %.6e", name, report["min_abs"], name, report["max_abs"])
    return report


def check_hessian(H: np.ndarray) -> dict[str, float]:
    """Condition number, determinant and extrema of a Hessian, also logged.

    ``pos_def`` is 1.0 when the symmetric part of ``H`` is positive definite.
    """
    report = matrix_report(H, "hessian")
    report["pos_def"] = float(is_pos_def(H))
    if not report["pos_def"]:
        logger.info("hessian is not positive definite")
    return report


__all__ = [
    "Hessian",
    "HessianAutodiff",
    "HessianFiniteDifferences",
    "HessianFunction",
    "check_hessian",
    "hessian",
    "make_hessian",
    "matrix_report",
]
