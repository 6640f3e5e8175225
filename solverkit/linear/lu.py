"""Dense linear solves for Newton directions.

These utilities avoid any dependency on SciPy: :class:`LUSolver` is a pure
NumPy Doolittle factorization with partial pivoting, :class:`NumpySolver`
defers to LAPACK through :func:`numpy.linalg.solve`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..exceptions import ConfigurationError, SingularMatrixError


class LinearSolver(ABC):
    """Factorize once, solve many times."""

    n: Optional[int] = None

    @abstractmethod
    def factorize(self, A: np.ndarray) -> "LinearSolver":
        """Prepare ``A`` for subsequent solves."""

    @abstractmethod
    def solve(self, b: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Return ``x`` with ``A x = b`` for the last factorized ``A``."""

    def ldiv(self, A: np.ndarray, b: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Factorize ``A`` and solve ``A x = b`` in one call."""
        return self.factorize(A).solve(b, out)

    def _check_rhs(self, b: np.ndarray) -> np.ndarray:
        if self.n is None:
            raise ConfigurationError(f"{type(self).__name__}.solve called before factorize")
        b = np.asarray(b)
        if b.shape != (self.n,):
            raise ConfigurationError(f"right-hand side has shape {b.shape}, expected ({self.n},)")
        return b


def _check_square(A: np.ndarray) -> np.ndarray:
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ConfigurationError(f"matrix must be square, got shape {A.shape}")
    return A


class LUSolver(LinearSolver):
    """LU decomposition ``P A = L U`` stored in place.

    After :meth:`factorize`, ``self.A`` holds the unit lower triangle ``L``
    (without its diagonal) below the diagonal and ``U`` on and above it;
    ``perms`` is the row permutation.

    Example:
        >>> A = np.array([[1., 2., 3.], [5., 7., 11.], [13., 17., 19.]])
        >>> x = LUSolver().ldiv(A, np.ones(3))
        >>> bool(np.allclose(A @ x, np.ones(3)))
        True
    """

    def __init__(self, pivot: bool = True) -> None:
        self.pivot = pivot
        self.A: Optional[np.ndarray] = None
        self.perms: Optional[np.ndarray] = None

    def factorize(self, A: np.ndarray) -> "LUSolver":
        A = _check_square(A)
        n = A.shape[0]
        dtype = np.result_type(A.dtype, np.float64) if A.dtype.kind in "iub" else A.dtype
        if self.A is None or self.A.shape != A.shape or self.A.dtype != dtype:
            self.A = np.empty((n, n), dtype=dtype)
            self.perms = np.empty(n, dtype=int)
        LU = self.A
        LU[...] = A
        self.perms[...] = np.arange(n)
        self.n = None

        for k in range(n):
            kp = k + int(np.argmax(np.abs(LU[k:, k]))) if self.pivot else k
            if LU[kp, k] == 0:
                raise SingularMatrixError(f"matrix is singular: zero pivot in column {k}")
            if kp != k:
                LU[[k, kp], :] = LU[[kp, k], :]
                self.perms[[k, kp]] = self.perms[[kp, k]]
            LU[k + 1:, k] /= LU[k, k]
            LU[k + 1:, k + 1:] -= np.outer(LU[k + 1:, k], LU[k, k + 1:])

        self.n = n
        return self

    def solve(self, b: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        b = self._check_rhs(b)
        LU = self.A
        x = np.array(b[self.perms], dtype=LU.dtype)
        for i in range(1, self.n):
            x[i] -= np.dot(LU[i, :i], x[:i])
        for i in range(self.n - 1, -1, -1):
            x[i] = (x[i] - np.dot(LU[i, i + 1:], x[i + 1:])) / LU[i, i]
        if out is None:
            return x
        out[...] = x
        return out


class NumpySolver(LinearSolver):
    """Stores ``A`` and solves with :func:`numpy.linalg.solve`."""

    def __init__(self) -> None:
        self.A: Optional[np.ndarray] = None

    def factorize(self, A: np.ndarray) -> "NumpySolver":
        A = _check_square(A)
        self.A = np.array(A, dtype=float if A.dtype.kind in "iub" else A.dtype)
        self.n = A.shape[0]
        return self

    def solve(self, b: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        b = self._check_rhs(b)
        try:
            x = np.linalg.solve(self.A, b)
        except np.linalg.LinAlgError as exc:
            raise SingularMatrixError(str(exc)) from exc
        if out is None:
            return x
        out[...] = x
        return out


_SOLVERS = {
    "lu": LUSolver,
    "numpy": NumpySolver,
}


def make_linear_solver(name: str | LinearSolver = "lu") -> LinearSolver:
    """Return a linear solver by name (``"lu"`` or ``"numpy"``), or pass one through."""
    if isinstance(name, LinearSolver):
        return name
    try:
        return _SOLVERS[name]()
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown linear solver {name!r}; expected one of {', '.join(_SOLVERS)}."
        ) from exc


__all__ = ["LUSolver", "LinearSolver", "NumpySolver", "make_linear_solver"]
