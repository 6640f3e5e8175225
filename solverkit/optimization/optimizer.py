"""Newton and quasi-Newton minimization of ``F: R^n -> R``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

from ..base.gradient import make_gradient
from ..base.hessian import make_hessian
from ..base.objectives import MultivariateObjective
from ..base.providers import DEFAULT_MODE
from ..config import Options, resolve_options
from ..core import MESSAGES, OptimizeResult, Status
from ..exceptions import ConfigurationError
from ..linear import LinearSolver
from ..linesearch import Backtracking, Linesearch, LinesearchMethod
from ..logging import get_logger
from ..utils import compute_new_iterate, l2norm
from .cache import NewtonOptimizerCache
from .hessians import ExactHessian, HessianApproximation, HessianBFGS, HessianDFP
from .status import OptimizerStatus

logger = get_logger(__name__)


class OptimizerMethod(ABC):
    """Tag selecting how the Newton direction is computed."""

    needs_hessian = False

    @abstractmethod
    def hessian_approximation(
        self, objective: MultivariateObjective, linear_solver: str | LinearSolver
    ) -> HessianApproximation:
        """Build the Hessian approximation for ``objective``."""


@dataclass(frozen=True)
class Newton(OptimizerMethod):
    """Exact (or finite difference) Hessian and a linear solve per iteration."""

    needs_hessian = True

    def hessian_approximation(self, objective, linear_solver="lu"):
        return ExactHessian(objective, linear_solver)


@dataclass(frozen=True)
class BFGS(OptimizerMethod):
    """BFGS inverse Hessian update, no linear solve."""

    def hessian_approximation(self, objective, linear_solver="lu"):
        return HessianBFGS(objective)


@dataclass(frozen=True)
class DFP(OptimizerMethod):
    """DFP inverse Hessian update, no linear solve."""

    def hessian_approximation(self, objective, linear_solver="lu"):
        return HessianDFP(objective)


_METHODS = {"newton": Newton, "bfgs": BFGS, "dfp": DFP}


def _resolve_method(method: str | OptimizerMethod | None) -> OptimizerMethod:
    if method is None:
        return BFGS()
    if isinstance(method, OptimizerMethod):
        return method
    try:
        return _METHODS[str(method).lower()]()
    except KeyError as exc:
        raise ConfigurationError(f"Unknown method {method!r}; expected one of {', '.join(_METHODS)}.") from exc


class Optimizer:
    """Line search Newton-type minimizer.

    Args:
        x0: starting point; fixes the dimension of the problem.
        F: objective ``F(x) -> float``.
        gradient: optional user gradient, ``g(x)`` or ``g(out, x)``.
        hessian: optional user Hessian, ``H(x)`` or ``H(out, x)``.
        method: :class:`Newton`, :class:`BFGS` (default) or :class:`DFP`.
        linesearch: a line search method, :class:`Backtracking` by default.
        mode: how missing derivatives are obtained, ``"autodiff"``
            (default), ``"finite"`` or ``"function"``. Autodiff traces ``F``
            with ``torch.func``, so ``F`` may only use arithmetic operators,
            indexing and reductions such as ``.sum()``; NumPy functions like
            ``np.exp`` cannot be traced and raise ``ConfigurationError``. Use
            ``"finite"`` or supply ``gradient``/``hessian`` for such ``F``.
        linear_solver: back end for :class:`Newton`, ``"lu"`` or ``"numpy"``.
        eps: finite difference step.
        options: an :class:`~solverkit.config.Options` instance; remaining
            keyword arguments override its fields.

    Example:
        >>> opt = Optimizer(np.array([1.0, 2.0]), lambda x: (x**2).sum(), method=Newton())
        >>> res = opt.solve()
        >>> bool(res.success)
        True
    """

    def __init__(
        self,
        x0: np.ndarray,
        F: Callable,
        gradient: Optional[Callable] = None,
        hessian: Optional[Callable] = None,
        method: str | OptimizerMethod | None = None,
        linesearch: Optional[LinesearchMethod] = None,
        mode: str = DEFAULT_MODE,
        linear_solver: str | LinearSolver = "lu",
        eps: Optional[float] = None,
        options: Optional[Options] = None,
        **option_kwargs: Any,
    ) -> None:
        self.options = resolve_options(options, **option_kwargs)
        dtype = self.options.dtype
        self.x0 = np.array(x0, dtype=dtype)
        if self.x0.ndim != 1 or self.x0.size == 0:
            raise ConfigurationError(f"x0 must be a non-empty 1D array, got shape {self.x0.shape}")
        n = self.x0.size
        self.method = _resolve_method(method)

        grad = make_gradient(F, n, grad=gradient, mode=mode, eps=eps, dtype=dtype)
        hess = None
        if self.method.needs_hessian or hessian is not None:
            hess = make_hessian(F, n, hess=hessian, mode=mode, gradient=grad, dtype=dtype)
        self.objective = MultivariateObjective(F, grad, hess)
        self.hessian = self.method.hessian_approximation(self.objective, linear_solver)
        self.linesearch = Linesearch(Backtracking() if linesearch is None else linesearch, self.options)
        self.cache = NewtonOptimizerCache(n, dtype)
        self.status = OptimizerStatus(n, dtype)
        self.history: list[np.ndarray] = []

    @property
    def iteration_number(self) -> int:
        return self.status.i

    def initialize(self, x: np.ndarray) -> None:
        """Clear all caches and evaluate ``f`` and ``g`` at the starting point."""
        self.objective.clear()
        self.cache.clear()
        self.history = []
        f = self.objective.force_value(x)
        g = self.objective.force_gradient(x)
        self.status.initialize(x, f, g)
        self.status.raise_if_nonfinite()
        self.hessian.initialize(x)
        if self.options.store_trace:
            self.history.append(x.copy())

    def solver_step(self, x: np.ndarray) -> float:
        """Compute a direction at ``x``, search along it and overwrite ``x``."""
        self.hessian.update(x)
        self.cache.update(x, self.objective.update_gradient(x), self.hessian)
        problem = self.cache.linesearch_problem(self.objective)
        alpha = self.linesearch(problem)
        compute_new_iterate(self.cache.x_prev, alpha, self.cache.direction, out=x)
        return alpha

    def update(self, x: np.ndarray) -> None:
        """Evaluate ``f`` and ``g`` at the accepted ``x`` and update the residuals."""
        f = self.objective.update_value(x)
        g = self.objective.update_gradient(x)
        self.status.update(x, f, g)

    def call_limit_reached(self) -> bool:
        o, obj = self.options, self.objective
        return (
            (o.f_calls_limit > 0 and obj.f_calls >= o.f_calls_limit)
            or (o.g_calls_limit > 0 and obj.g_calls >= o.g_calls_limit)
            or (o.h_calls_limit > 0 and obj.h_calls >= o.h_calls_limit)
        )

    def solve(self, x: Optional[np.ndarray] = None) -> OptimizeResult:
        """Iterate from ``x`` (default ``x0``) until a stopping criterion holds.

        A float array of the configured dtype is updated in place.

        Raises:
            NumericalError: If ``x``, ``f`` or ``g`` becomes non-finite.
            SingularMatrixError: If a Newton system cannot be solved.
        """
        if x is None:
            x = self.x0.copy()
        elif not (isinstance(x, np.ndarray) and x.dtype == self.options.dtype and x.shape == self.x0.shape):
            x = np.array(x, dtype=self.options.dtype)
            if x.shape != self.x0.shape:
                raise ConfigurationError(f"x has shape {x.shape}, expected {self.x0.shape}")

        options = self.options
        self.initialize(x)
        code: Optional[Status] = None
        while self.status.i == 0 or not self.status.meets_stopping_criteria(options):
            if self.call_limit_reached():
                code = Status.CALL_LIMIT
                break
            self.status.increase_iteration_number()
            self.solver_step(x)
            self.update(x)
            if options.store_trace:
                self.history.append(x.copy())
            if options.verbosity >= 2:
                logger.info(self.status.summary())
        if code is None:
            code = self.status.termination_status(options)
        self.status.warn_iteration_number(options)

        success = code is Status.CONVERGED
        message = MESSAGES[code]
        if options.verbosity >= 1:
            log = logger.info if success else logger.warning
            log("%s after %d iterations, f = %.6e, |g| = %.2e", message, self.status.i,
                self.objective.update_value(x), self.status.rg)

        return OptimizeResult(
            x=x.copy(),
            fun=float(self.objective.update_value(x)),
            nit=self.status.i,
            success=success,
            status=code,
            message=message,
            grad_norm=l2norm(self.objective.update_gradient(x)),
            nfev=self.objective.f_calls,
            njev=self.objective.g_calls,
            nhev=self.objective.h_calls,
            history=self.history,
            residuals=self.status.residuals(),
        )


def minimize(
    F: Callable,
    x0: np.ndarray,
    method: str | OptimizerMethod | None = "bfgs",
    gradient: Optional[Callable] = None,
    hessian: Optional[Callable] = None,
    linesearch: Optional[LinesearchMethod] = None,
    mode: str = DEFAULT_MODE,
    options: Optional[Options] = None,
    **option_kwargs: Any,
) -> OptimizeResult:
    """Minimize ``F`` starting from ``x0``; ``method`` is a name or an :class:`OptimizerMethod`."""
    opt = Optimizer(
        x0,
        F,
        gradient=gradient,
        hessian=hessian,
        method=method,
        linesearch=linesearch,
        mode=mode,
        options=options,
        **option_kwargs,
    )
    return opt.solve()


def newton_method(F: Callable, x0: np.ndarray, gradient=None, hessian=None, **kwargs: Any) -> OptimizeResult:
    """Newton's method with a line search (Backtracking unless ``linesearch`` is given)."""
    return minimize(F, x0, method=Newton(), gradient=gradient, hessian=hessian, **kwargs)


def bfgs(F: Callable, x0: np.ndarray, gradient=None, **kwargs: Any) -> OptimizeResult:
    """Full-memory BFGS with a line search."""
    return minimize(F, x0, method=BFGS(), gradient=gradient, **kwargs)


def dfp(F: Callable, x0: np.ndarray, gradient=None, **kwargs: Any) -> OptimizeResult:
    """Davidon-Fletcher-Powell with a line search."""
    return minimize(F, x0, method=DFP(), gradient=gradient, **kwargs)


__all__ = [
    "BFGS",
    "DFP",
    "Newton",
    "Optimizer",
    "OptimizerMethod",
    "bfgs",
    "dfp",
    "minimize",
    "newton_method",
]
