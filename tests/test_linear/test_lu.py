"""Tests for the dense linear solvers."""

import numpy as np
import pytest

from solverkit.exceptions import ConfigurationError, SingularMatrixError
from solverkit.linear import LUSolver, NumpySolver, make_linear_solver


@pytest.mark.parametrize("solver", [LUSolver(), LUSolver(pivot=False), NumpySolver()])
def test_solve_well_conditioned(solver, rng):
    A = rng.standard_normal((5, 5)) + 5 * np.eye(5)
    b = rng.standard_normal(5)
    x = solver.ldiv(A, b)
    assert np.allclose(A @ x, b, atol=1e-12)


def test_lu_factors_reproduce_matrix():
    A = np.array([[1.0, 2.0, 3.0], [5.0, 7.0, 11.0], [13.0, 17.0, 19.0]])
    lu = LUSolver().factorize(A)
    L = np.tril(lu.A, -1) + np.eye(3)
    U = np.triu(lu.A)
    assert np.allclose(L @ U, A[lu.perms])


def test_lu_pivoting_handles_zero_leading_entry():
    A = np.array([[0.0, 1.0], [1.0, 0.0]])
    x = LUSolver().ldiv(A, np.array([2.0, 3.0]))
    assert np.allclose(x, [3.0, 2.0])
    with pytest.raises(SingularMatrixError):
        LUSolver(pivot=False).factorize(A)


def test_factorize_once_solve_many(rng):
    A = rng.standard_normal((4, 4)) + 4 * np.eye(4)
    solver = LUSolver().factorize(A)
    out = np.empty(4)
    for _ in range(3):
        b = rng.standard_normal(4)
        result = solver.solve(b, out=out)
        assert result is out
        assert np.allclose(A @ out, b)


def test_factorization_does_not_modify_input():
    A = np.array([[4.0, 3.0], [6.0, 3.0]])
    original = A.copy()
    LUSolver().factorize(A)
    assert np.array_equal(A, original)


@pytest.mark.parametrize("solver", [LUSolver(), NumpySolver()])
def test_singular_matrix(solver):
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    with pytest.raises(SingularMatrixError):
        solver.ldiv(A, np.ones(2))


def test_singular_matrix_error_is_linalg_error():
    assert issubclass(SingularMatrixError, np.linalg.LinAlgError)


def test_solve_before_factorize_and_shape_checks():
    with pytest.raises(ConfigurationError):
        LUSolver().solve(np.ones(2))
    with pytest.raises(ConfigurationError):
        LUSolver().factorize(np.ones((2, 3)))
    solver = LUSolver().factorize(np.eye(2))
    with pytest.raises(ConfigurationError):
        solver.solve(np.ones(3))


def test_integer_matrix_is_promoted():
    x = LUSolver().ldiv(np.array([[2, 0], [0, 4]]), np.array([1.0, 1.0]))
    assert np.allclose(x, [0.5, 0.25])


def test_make_linear_solver():
    assert isinstance(make_linear_solver(), LUSolver)
    assert isinstance(make_linear_solver("numpy"), NumpySolver)
    solver = LUSolver()
    assert make_linear_solver(solver) is solver
    with pytest.raises(ConfigurationError):
        make_linear_solver("qr")
