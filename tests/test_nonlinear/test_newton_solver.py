"""Tests for Newton, quasi-Newton and fixed point solvers of ``F(x) = 0``."""

import numpy as np
import pytest

from solverkit.core import Status
from solverkit.exceptions import ConfigurationError, NumericalError, SingularMatrixError
from solverkit.linesearch import Backtracking, BierlaireQuadratic, Bisection, Quadratic, Static
from solverkit.nonlinear import (
    FixedPointIterator,
    NewtonSolver,
    QuasiNewtonSolver,
    fixed_point_solve,
    newton_solve,
)

ROOTS = [-4.735, -0.674, 0.761, 4.5605]


def four_roots(x):
    return np.exp(x) * (x**3 - 5 * x**2 + 2 * x) + 2.0


def four_roots_jacobian(x):
    return np.diag(np.exp(x) * (x**3 - 2 * x**2 - 8 * x + 2))


def cubic(x):
    return x**3 + x - 2.0


@pytest.mark.parametrize("x0, root", zip([-4.8, -0.8, 0.7, 4.6], ROOTS))
def test_four_roots_with_analytic_jacobian(x0, root):
    res = newton_solve(four_roots, np.array([x0]), jacobian=four_roots_jacobian)
    assert res.success
    assert res.status is Status.CONVERGED
    assert abs(res.x[0] - root) < 1e-2
    assert abs(res.fun[0]) < 1e-10
    assert res.residual == pytest.approx(abs(res.fun[0]))


def test_four_roots_from_random_start(rng):
    x0 = np.array([rng.random()])
    res = newton_solve(four_roots, x0, mode="finite")
    assert res.success
    assert abs(res.x[0] - 0.761) < 1e-2
    assert abs(four_roots(res.x)[0]) < 1e-10


def test_numpy_functions_need_finite_mode():
    with pytest.raises(ConfigurationError):
        newton_solve(four_roots, np.array([0.7]))
    res = newton_solve(four_roots, np.array([0.7]), mode="finite")
    assert abs(res.x[0] - 0.761) < 1e-2


@pytest.mark.parametrize("linesearch", [Static(), Backtracking(), Quadratic()], ids=["static", "backtracking", "quadratic"])
def test_autodiff_jacobian(linesearch):
    res = newton_solve(cubic, np.array([3.0, -1.0, 0.5]), linesearch=linesearch)
    assert res.success
    assert np.allclose(res.x, 1.0, atol=1e-12)


@pytest.mark.parametrize(
    "linesearch",
    [Static(), Backtracking(), Quadratic(), Bisection(), BierlaireQuadratic()],
    ids=["static", "backtracking", "quadratic", "bisection", "bierlaire"],
)
def test_start_at_root(linesearch):
    res = newton_solve(cubic, np.array([1.0]), linesearch=linesearch)
    assert res.success
    assert res.nit == 1
    assert res.x[0] == 1.0
    assert res.residual == 0.0


def test_numpy_linear_solver():
    res = newton_solve(cubic, np.array([2.0, 0.0]), linear_solver="numpy")
    assert res.success
    assert np.allclose(res.x, 1.0)


def test_scalar_start_is_promoted():
    res = newton_solve(cubic, 2.0)
    assert res.x.shape == (1,)
    assert res.x[0] == pytest.approx(1.0)


def test_quasi_newton_reuses_jacobian():
    jac = lambda x: np.diag(3 * x**2 + 1)
    res = QuasiNewtonSolver(np.array([2.0, 1.5]), cubic, jacobian=jac).solve()
    assert res.success
    assert np.allclose(res.x, 1.0)
    assert res.njev == 1 + (res.nit - 1) // 5
    assert res.njev < res.nit


def test_refactorize_every_iteration():
    jac = lambda x: np.diag(3 * x**2 + 1)
    res = newton_solve(cubic, np.array([2.0, 1.5]), jacobian=jac)
    assert res.njev == res.nit


def test_inplace_function_with_params():
    def F(y, x, target):
        y[...] = x**3 + x - target

    res = newton_solve(F, np.array([0.0, 0.0]), mode="finite", inplace=True, params=np.array([2.0, 10.0]))
    assert res.success
    assert np.allclose(res.x, [1.0, 2.0])


def test_two_dimensional_system():
    def F(x):
        return np.array([x[0] ** 2 + x[1] ** 2 - 4.0, x[0] - x[1]])

    def J(x):
        return np.array([[2 * x[0], 2 * x[1]], [1.0, -1.0]])

    res = newton_solve(F, np.array([1.0, 0.5]), jacobian=J)
    assert res.success
    assert np.allclose(res.x, [np.sqrt(2.0), np.sqrt(2.0)])


def test_singular_jacobian():
    with pytest.raises(SingularMatrixError):
        newton_solve(lambda x: x**2, np.array([0.0, 1.0]))


def test_nonfinite_start_raises():
    with pytest.raises(NumericalError):
        newton_solve(lambda x: x * np.nan, np.array([1.0]), mode="finite")


def test_call_limit():
    res = newton_solve(cubic, np.array([3.0]), g_calls_limit=1)
    assert res.status is Status.CALL_LIMIT
    assert res.nit == 1
    assert not res.success


def test_max_iterations_and_trace():
    res = newton_solve(cubic, np.array([3.0]), linesearch=Static(0.1), max_iterations=4, store_trace=True)
    assert res.status is Status.MAX_ITER
    assert res.nit == 4
    assert len(res.history) == 5
    assert res.history[0][0] == 3.0


def test_invalid_configuration():
    with pytest.raises(ConfigurationError):
        NewtonSolver(np.ones(2), cubic, n_out=3)
    with pytest.raises(ConfigurationError):
        NewtonSolver(np.ones(2), cubic, refactorize=0)
    with pytest.raises(ConfigurationError):
        NewtonSolver(np.ones(2), cubic, mode="function")
    with pytest.raises(ConfigurationError):
        NewtonSolver(np.ones((2, 2)), cubic)
    with pytest.raises(ConfigurationError):
        NewtonSolver(np.ones(2), cubic).solve(np.ones(3))


def test_repeated_solves_are_identical():
    solver = NewtonSolver(np.array([3.0, -1.0]), cubic)
    first, second = solver.solve(), solver.solve()
    assert np.array_equal(first.x, second.x)
    assert (first.nit, first.nfev, first.njev) == (second.nit, second.nfev, second.njev)


def test_fixed_point_iteration():
    res = fixed_point_solve(lambda x: x - np.cos(x), np.array([1.0]))
    assert res.success
    assert res.njev == 0
    assert res.x[0] == pytest.approx(0.7390851332151607, abs=1e-10)


def test_fixed_point_with_line_search():
    solver = FixedPointIterator(np.array([1.0, 0.0]), lambda x: x - 0.5 * np.cos(x), linesearch=Backtracking())
    res = solver.solve()
    assert res.success
    assert np.allclose(res.x - 0.5 * np.cos(res.x), 0.0, atol=1e-12)
