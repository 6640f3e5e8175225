"""Newton and quasi-Newton (frozen Jacobian) solvers for ``F(x) = 0``."""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from ..base.jacobian import make_jacobian
from ..base.providers import DEFAULT_MODE
from ..base.systems import NonlinearSystem
from ..config import Options, resolve_options
from ..core import SolverResult
from ..exceptions import ConfigurationError
from ..linear import LinearSolver, make_linear_solver
from ..linesearch import Backtracking, LinesearchMethod
from .nonlinear_solver import NonlinearSolver, check_start

DEFAULT_REFACTORIZE = 1
DEFAULT_ITERATIONS_QUASI_NEWTON_SOLVER = 5


class NewtonSolver(NonlinearSolver):
    """Newton's method with a line search on ``|F(x)|^2``.

    Each iteration solves ``J(x) d = -F(x)``. The Jacobian is re-evaluated
    and factorized on iterations ``1, 1 + refactorize, 1 + 2 * refactorize``
    and so on; in between the last factorization is reused.

    Args:
        x0: starting point; fixes the dimension.
        F: residual function ``F(x[, params]) -> y``, or ``F(y, x[, params])``
            with ``inplace=True``.
        jacobian: optional user Jacobian, ``J(x[, params])`` or
            ``J(out, x[, params])``.
        mode: ``"autodiff"`` (default), ``"finite"`` or ``"function"``.
            Autodiff traces ``F`` with ``torch.func``; an ``F`` built from
            NumPy functions such as ``np.exp`` cannot be traced and raises
            ``ConfigurationError``. Use ``"finite"`` or pass ``jacobian``.
        linesearch: :class:`~solverkit.linesearch.Backtracking` by default.
        linear_solver: ``"lu"`` (default), ``"numpy"`` or a
            :class:`~solverkit.linear.LinearSolver`.
        refactorize: number of iterations between Jacobian updates.
        n_out: output dimension; Newton's method needs ``n_out == len(x0)``.
        eps: finite difference step.
        options: an :class:`~solverkit.config.Options` instance; remaining
            keyword arguments override its fields.

    Example:
        >>> solver = NewtonSolver(np.array([1.0]), lambda x: x**2 - 2.0)
        >>> res = solver.solve()
        >>> bool(np.isclose(res.x[0], np.sqrt(2.0)))
        True
    """

    def __init__(
        self,
        x0: np.ndarray,
        F: Callable,
        jacobian: Optional[Callable] = None,
        mode: str = DEFAULT_MODE,
        linesearch: Optional[LinesearchMethod] = None,
        linear_solver: str | LinearSolver = "lu",
        refactorize: int = DEFAULT_REFACTORIZE,
        n_out: Optional[int] = None,
        inplace: bool = False,
        params: Optional[Any] = None,
        eps: Optional[float] = None,
        options: Optional[Options] = None,
        **option_kwargs: Any,
    ) -> None:
        options = resolve_options(options, **option_kwargs)
        x0 = check_start(x0, options.dtype)
        n = x0.size
        if n_out is not None and n_out != n:
            raise ConfigurationError(f"Newton's method needs a square system, got n_in={n}, n_out={n_out}")
        if int(refactorize) != refactorize or refactorize < 1:
            raise ConfigurationError(f"refactorize must be a positive integer, got {refactorize}")
        jac = make_jacobian(
            F, n, n, jac=jacobian, mode=mode, eps=eps, inplace=inplace, params=params, dtype=options.dtype
        )
        system = NonlinearSystem(F, jac, n, n, inplace=inplace, params=params, dtype=options.dtype)
        super().__init__(x0, system, Backtracking() if linesearch is None else linesearch, options)
        self.linear_solver = make_linear_solver(linear_solver)
        self.refactorize = int(refactorize)

    def compute_direction(self, x: np.ndarray) -> None:
        i = self.status.i
        if i <= 1 or (i - 1) % self.refactorize == 0:
            self.cache.jacobian[...] = self.system.force_jacobian(x)
            self.linear_solver.factorize(self.cache.jacobian)
        self.linear_solver.solve(self.cache.rhs, out=self.cache.direction)


class QuasiNewtonSolver(NewtonSolver):
    """:class:`NewtonSolver` that refactorizes the Jacobian every 5 iterations."""

    def __init__(self, x0: np.ndarray, F: Callable, jacobian: Optional[Callable] = None, **kwargs: Any) -> None:
        kwargs.setdefault("refactorize", DEFAULT_ITERATIONS_QUASI_NEWTON_SOLVER)
        super().__init__(x0, F, jacobian, **kwargs)


def newton_solve(F: Callable, x0: np.ndarray, jacobian: Optional[Callable] = None, **kwargs: Any) -> SolverResult:
    """Solve ``F(x) = 0`` from ``x0``; keyword arguments go to :class:`NewtonSolver`.

    Without ``jacobian`` the default ``mode="autodiff"`` needs an ``F`` that
    torch can trace (operators and indexing only). For ``F`` written with
    NumPy functions pass ``mode="finite"``:

    >>> res = newton_solve(lambda x: np.exp(x) - 2.0, np.array([0.0]), mode="finite")
    >>> bool(np.isclose(res.x[0], np.log(2.0)))
    True
    """
    return NewtonSolver(x0, F, jacobian, **kwargs).solve()


__all__ = [
    "DEFAULT_ITERATIONS_QUASI_NEWTON_SOLVER",
    "NewtonSolver",
    "QuasiNewtonSolver",
    "newton_solve",
]
