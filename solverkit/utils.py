"""Small numerical helpers shared across the solvers."""

from __future__ import annotations

import inspect
from typing import Callable, Optional

import numpy as np

Array = np.ndarray


def squared_norm(x: Array) -> float:
    """Return ``sum(x_i ** 2)``."""
    x = np.asarray(x)
    return float(np.dot(x.ravel(), x.ravel()))


def l2norm(x: Array) -> float:
    return float(np.sqrt(squared_norm(x)))


def outer(out: Array, x: Array, y: Array) -> Array:
    """Write the outer product ``x y^T`` into ``out``."""
    if out.shape != (x.shape[0], y.shape[0]):
        raise ValueError(f"out has shape {out.shape}, expected {(x.shape[0], y.shape[0])}")
    np.multiply(x[:, None], y[None, :], out=out)
    return out


def compute_new_iterate(x: Array, alpha: float, direction: Array, out: Optional[Array] = None) -> Array:
    """Return ``x + alpha * direction``, written into ``out`` when given."""
    if out is None:
        return x + alpha * direction
    np.multiply(direction, alpha, out=out)
    out += x
    return out


def all_finite(value) -> bool:
    return bool(np.all(np.isfinite(value)))


def symmetrize(matrix: Array) -> Array:
    """Return ``0.5 * (matrix + matrix.T)``."""
    return 0.5 * (matrix + matrix.T)


def is_pos_def(mat: Array, tol: float = 1e-12) -> bool:
    """Check if a matrix is positive definite via eigenvalues."""
    eigvals = np.linalg.eigvalsh(symmetrize(mat))
    return bool(np.all(eigvals > tol))


def positional_arity(func: Callable) -> int:
    """Number of positional parameters ``func`` accepts (-1 for ``*args``)."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return -1
    count = 0
    for param in sig.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return -1
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


__all__ = [
    "Array",
    "all_finite",
    "compute_new_iterate",
    "is_pos_def",
    "l2norm",
    "outer",
    "positional_arity",
    "squared_norm",
    "symmetrize",
]
