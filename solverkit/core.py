"""Result containers and termination codes shared by all drivers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

import numpy as np

Array = np.ndarray


class Status(Enum):
    """Reason an iteration stopped."""

    CONVERGED = "converged"
    MAX_ITER = "max_iter"
    F_INCREASED = "f_increased"
    BREAK = "break"
    CALL_LIMIT = "call_limit"


MESSAGES = {
    Status.CONVERGED: "Convergence criteria satisfied.",
    Status.MAX_ITER: "Maximum iterations reached.",
    Status.F_INCREASED: "Function value increased and increases are not allowed.",
    Status.BREAK: "A residual exceeded its break threshold.",
    Status.CALL_LIMIT: "Function evaluation budget exhausted.",
}


@dataclass
class OptimizeResult:
    """Standard result object returned by the optimizers."""

    x: Array
    fun: float
    nit: int
    success: bool
    status: Status
    message: str
    grad_norm: float
    nfev: int
    njev: int
    nhev: int
    history: List[Array] = field(default_factory=list)
    residuals: Dict[str, float] = field(default_factory=dict)


@dataclass
class SolverResult:
    """Standard result object returned by the nonlinear solvers.

    ``fun`` is the residual vector ``F(x)`` and ``residual`` its norm.
    """

    x: Array
    fun: Array
    nit: int
    success: bool
    status: Status
    message: str
    residual: float
    nfev: int
    njev: int
    history: List[Array] = field(default_factory=list)
    residuals: Dict[str, float] = field(default_factory=dict)


__all__ = ["Array", "MESSAGES", "OptimizeResult", "SolverResult", "Status"]
