"""Gradient providers for scalar objectives ``F: R^n -> R``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import numpy as np
from torch import func as torch_func

from ..exceptions import ConfigurationError
from ..logging import get_logger
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
)

logger = get_logger(__name__)


class Gradient(ABC):
    """In-place gradient functor ``provider(out, x) -> out``."""

    def __init__(self, dim: int, dtype: Any = np.float64) -> None:
        if dim < 1:
            raise ConfigurationError(f"dim must be positive, got {dim}")
        self.dim = int(dim)
        self.dtype = np.dtype(dtype)

    @abstractmethod
    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        """Write the gradient at ``x`` into ``out``."""

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        """Out-of-place gradient at ``x``."""
        out = np.empty(self.dim, dtype=self.dtype)
        return self(out, x)


class GradientFunction(Gradient):
    """Wraps a user gradient, either ``grad(out, x)`` or ``grad(x) -> g``."""

    def __init__(self, grad: Callable, dim: int, dtype: Any = np.float64) -> None:
        super().__init__(dim, dtype)
        self.grad = grad
        self.inplace = detect_inplace(grad, 1, "gradient")

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.dim)
        if self.inplace:
            self.grad(out, x)
            return out
        return store(out, self.grad(x), "gradient")


class GradientAutodiff(Gradient):
    """Reverse mode gradient built once with :func:`torch.func.grad`."""

    def __init__(self, F: Callable, dim: int, dtype: Any = np.float64) -> None:
        super().__init__(dim, dtype)
        self.F = F
        self._torch_dtype = torch_dtype(self.dtype)
        self._grad = torch_func.grad(F)

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.dim)
        g = call_autodiff(self._grad, as_tensor(x, self._torch_dtype))
        out[...] = to_numpy(g)
        return out


class GradientFiniteDifferences(Gradient):
    """Central differences with step ``eps_j = eps * x_j + eps``.

    ``e`` and ``tx`` are scratch buffers reused on every call, so one
    instance must not be shared between concurrent solves.
    """

    def __init__(self, F: Callable, dim: int, eps: Optional[float] = None, dtype: Any = np.float64) -> None:
        super().__init__(dim, dtype)
        self.F = F
        self.eps = default_step(self.dtype) if eps is None else float(eps)
        if not self.eps > 0:
            raise ConfigurationError("eps must be positive")
        self.e = np.zeros(self.dim, dtype=self.dtype)
        self.tx = np.zeros(self.dim, dtype=self.dtype)

    def __call__(self, out: np.ndarray, x: np.ndarray) -> np.ndarray:
        check_input(x, self.dim)
        for j in range(self.dim):
            eps_j = self.eps * x[j] + self.eps
            if eps_j == 0:
                eps_j = self.eps
            self.e.fill(0)
            self.e[j] = eps_j
            np.add(x, self.e, out=self.tx)
            f1 = float(self.F(self.tx))
            np.subtract(x, self.e, out=self.tx)
            f2 = float(self.F(self.tx))
            out[j] = (f1 - f2) / (2 * eps_j)
        return out


def make_gradient(
    F: Callable,
    dim: int,
    grad: Optional[Callable] = None,
    mode: str = DEFAULT_MODE,
    eps: Optional[float] = None,
    dtype: Any = np.float64,
) -> Gradient:
    """Select a gradient provider.

    A user gradient ``grad`` always takes precedence; otherwise ``mode``
    decides between automatic differentiation and finite differences.
    """
    check_mode(mode)
    if grad is not None:
        return GradientFunction(grad, dim, dtype)
    if mode == "function":
        raise ConfigurationError("mode='function' requires a user supplied gradient.")
    if mode == "autodiff":
        return GradientAutodiff(F, dim, dtype)
    return GradientFiniteDifferences(F, dim, eps=eps, dtype=dtype)


def gradient(x: np.ndarray, grad: Gradient) -> np.ndarray:
    """Allocate a buffer and evaluate ``grad`` at ``x``."""
    return grad.evaluate(x)


def check_gradient(g: np.ndarray) -> dict[str, float]:
    """Summarize a gradient vector and log the summary."""
    g = np.asarray(g)
    report = {
        "norm": float(np.linalg.norm(g)),
        "min_abs": float(np.min(np.abs(g))),
        "max_abs": float(np.max(np.abs(g))),
    }
    logger.info(
        "norm(gradient) = %.6e, min|gradient| = %.6e, max|gradient| = %.6e",
        report["norm"],
        report["min_abs"],
        report["max_abs"],
    )
    return report


__all__ = [
    "Gradient",
    "GradientAutodiff",
    "GradientFiniteDifferences",
    "GradientFunction",
    "check_gradient",
    "gradient",
    "make_gradient",
]
