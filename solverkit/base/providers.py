"""Shared plumbing for the derivative providers.

A provider is selected once, at construction, from one of three modes:

* ``"function"``: wrap a derivative written by the user,
* ``"autodiff"``: differentiate ``F`` with :mod:`torch.func`,
* ``"finite"``: central finite differences on preallocated buffers.

Autodiff requires ``F`` to be expressible on torch tensors, e.g. built from
arithmetic operators, indexing and ``torch`` functions.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np
import torch

from ..config import machine_epsilon
from ..exceptions import ConfigurationError
from ..utils import positional_arity

MODES = ("function", "autodiff", "finite")
DEFAULT_MODE = "autodiff"

_TORCH_DTYPES = {
    np.dtype(np.float32): torch.float32,
    np.dtype(np.float64): torch.float64,
}


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ConfigurationError(f"Unknown derivative mode {mode!r}; expected one of {', '.join(MODES)}.")
    return mode


def default_step(dtype: Any = np.float64) -> float:
    """Finite difference base step ``8 * sqrt(eps)``."""
    return 8.0 * float(np.sqrt(machine_epsilon(dtype)))


def torch_dtype(dtype: Any) -> torch.dtype:
    try:
        return _TORCH_DTYPES[np.dtype(dtype)]
    except KeyError as exc:
        raise ConfigurationError(f"Automatic differentiation is not available for dtype {dtype}.") from exc


def as_tensor(x: np.ndarray, dtype: torch.dtype) -> torch.Tensor:
    return torch.as_tensor(np.asarray(x), dtype=dtype)


def to_numpy(value: torch.Tensor) -> np.ndarray:
    return value.detach().cpu().numpy()


def call_autodiff(transform: Callable, x: torch.Tensor) -> torch.Tensor:
    """Apply a ``torch.func`` transform, reporting untraceable functions as setup errors."""
    try:
        return transform(x)
    except (RuntimeError, TypeError) as exc:
        raise ConfigurationError(
            "Automatic differentiation failed; the function must accept and return torch tensors "
            f"({exc})."
        ) from exc


def detect_inplace(func: Callable, nargs: int, what: str) -> bool:
    """Return True if ``func`` takes an output buffer before its ``nargs`` inputs."""
    arity = positional_arity(func)
    if arity == nargs + 1:
        return True
    if arity == nargs or arity == -1:
        return False
    raise ConfigurationError(
        f"{what} must accept {nargs} argument(s) (out-of-place) or {nargs + 1} (in-place), got {arity}."
    )


def store(out: np.ndarray, value: Any, what: str) -> np.ndarray:
    """Copy an out-of-place result into ``out``, checking its shape."""
    value = np.asarray(value, dtype=out.dtype)
    if value.size != out.size:
        raise ConfigurationError(f"{what} returned shape {value.shape}, expected {out.shape}.")
    out[...] = value.reshape(out.shape)
    return out


def check_input(x: np.ndarray, dim: int) -> None:
    if np.shape(x) != (dim,):
        raise ConfigurationError(f"Expected an input of shape ({dim},), got {np.shape(x)}.")


def with_params(func: Callable, params: Optional[Any]) -> Callable:
    """Bind an opaque trailing ``params`` argument, if any."""
    if params is None:
        return func
    return lambda *args: func(*args, params)


__all__ = [
    "DEFAULT_MODE",
    "MODES",
    "as_tensor",
    "call_autodiff",
    "check_input",
    "check_mode",
    "default_step",
    "detect_inplace",
    "store",
    "to_numpy",
    "torch_dtype",
    "with_params",
]
