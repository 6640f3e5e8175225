"""Solver options shared by the optimizers, nonlinear solvers and line searches.

Tolerances left as ``None`` are filled in from the floating point type given by
``dtype``, so ``Options(dtype=np.float32)`` yields single precision defaults.
A break threshold (``*_break``) stops the iteration when a residual grows past
it; a tolerance declares convergence when a residual falls below it.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Optional

import numpy as np

from .exceptions import ConfigurationError

F_CALLS_LIMIT = 0
G_CALLS_LIMIT = 0
H_CALLS_LIMIT = 0
ALLOW_F_INCREASES = True
MIN_ITERATIONS = 0
MAX_ITERATIONS = 1_000
WARN_ITERATIONS = 1_000
VERBOSITY = 1

_DTYPE_DEFAULTS = ("x_abstol", "x_reltol", "x_suctol", "f_abstol", "f_reltol", "f_suctol", "f_mindec", "g_restol")


def machine_epsilon(dtype: Any = np.float64) -> float:
    return float(np.finfo(dtype).eps)


def default_tolerance(dtype: Any = np.float64) -> float:
    """Return ``2 * eps(dtype)``."""
    return 2.0 * machine_epsilon(dtype)


def absolute_tolerance(dtype: Any = np.float64) -> float:
    """Absolute tolerance for function values, zero for every float type."""
    return 0.0


def minimum_decrease_threshold(dtype: Any = np.float64) -> float:
    """Minimum relative decrease of ``f`` per iteration (``1e-4``)."""
    return 1e-4


def default_precision(dtype: Any = np.float64) -> float:
    """Precision used by the Bierlaire quadratic line search (``8 * eps``)."""
    dtype = np.dtype(dtype)
    if dtype not in (np.dtype(np.float32), np.dtype(np.float64)):
        raise ConfigurationError(f"No default precision defined for {dtype}.")
    return 8.0 * machine_epsilon(dtype)


@dataclass(frozen=True)
class Options:
    """Read-only tolerances and iteration limits for one solve.

    Attributes:
        x_abstol, x_reltol, x_suctol: absolute, relative and successive
            tolerances on the change in ``x``.
        f_abstol, f_reltol, f_suctol: the same for the function value.
        f_mindec: minimum decrease ratio required for ``f`` convergence.
        g_restol: tolerance on the gradient norm.
        x_abstol_break ... g_restol_break: hard thresholds; exceeding one
            terminates the run without convergence.
        f_calls_limit, g_calls_limit, h_calls_limit: evaluation budgets,
            0 means unlimited.
        allow_f_increases: keep iterating when ``f`` goes up.
        min_iterations, max_iterations, warn_iterations: iteration bounds.
        store_trace: record every accepted iterate in the result history.
        verbosity: 0 silent, 1 summary at termination, 2 per-iteration trace.
        dtype: floating point type the defaults are derived from.
    """

    x_abstol: Optional[float] = None
    x_reltol: Optional[float] = None
    x_suctol: Optional[float] = None
    f_abstol: Optional[float] = None
    f_reltol: Optional[float] = None
    f_suctol: Optional[float] = None
    f_mindec: Optional[float] = None
    g_restol: Optional[float] = None
    x_abstol_break: float = np.inf
    x_reltol_break: float = np.inf
    f_abstol_break: float = np.inf
    f_reltol_break: float = np.inf
    g_restol_break: float = np.inf
    f_calls_limit: int = F_CALLS_LIMIT
    g_calls_limit: int = G_CALLS_LIMIT
    h_calls_limit: int = H_CALLS_LIMIT
    allow_f_increases: bool = ALLOW_F_INCREASES
    min_iterations: int = MIN_ITERATIONS
    max_iterations: int = MAX_ITERATIONS
    warn_iterations: int = WARN_ITERATIONS
    store_trace: bool = False
    verbosity: int = VERBOSITY
    dtype: Any = np.float64

    def __post_init__(self) -> None:
        try:
            dtype = np.dtype(self.dtype)
            np.finfo(dtype)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"dtype must be a floating point type, got {self.dtype!r}") from exc
        object.__setattr__(self, "dtype", dtype)

        tol = default_tolerance(dtype)
        defaults = {
            "x_abstol": tol,
            "x_reltol": tol,
            "x_suctol": tol,
            "f_abstol": absolute_tolerance(dtype),
            "f_reltol": tol,
            "f_suctol": tol,
            "f_mindec": minimum_decrease_threshold(dtype),
            "g_restol": float(np.sqrt(tol / 2)),
        }
        for name, value in defaults.items():
            if getattr(self, name) is None:
                object.__setattr__(self, name, value)

        for name in (*defaults, "x_abstol_break", "x_reltol_break", "f_abstol_break",
                     "f_reltol_break", "g_restol_break"):
            value = float(getattr(self, name))
            if np.isnan(value) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative number, got {value}")
            object.__setattr__(self, name, value)

        for name in ("f_calls_limit", "g_calls_limit", "h_calls_limit", "min_iterations",
                     "max_iterations", "warn_iterations", "verbosity"):
            value = getattr(self, name)
            if int(value) != value or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value}")
            object.__setattr__(self, name, int(value))

        if self.min_iterations > self.max_iterations:
            raise ConfigurationError("min_iterations cannot exceed max_iterations")

    def replace(self, **changes: Any) -> "Options":
        """Return a copy with ``changes`` applied."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        if "dtype" in changes:
            # tolerances not passed alongside dtype are re-derived from it
            for name in _DTYPE_DEFAULTS:
                changes.setdefault(name, None)
        return replace(self, **changes)

    def __str__(self) -> str:
        return "\n".join(f"{f.name:>24s} = {getattr(self, f.name)}" for f in fields(self))


def resolve_options(options: Optional[Options] = None, **option_kwargs: Any) -> Options:
    """Merge an optional ``Options`` instance with keyword overrides."""
    if options is None:
        try:
            return Options(**option_kwargs)
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc
    if option_kwargs:
        return options.replace(**option_kwargs)
    return options


__all__ = [
    "Options",
    "absolute_tolerance",
    "default_precision",
    "default_tolerance",
    "machine_epsilon",
    "minimum_decrease_threshold",
    "resolve_options",
]
