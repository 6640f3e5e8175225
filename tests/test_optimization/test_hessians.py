"""Tests for the exact and secant Hessian approximations."""

import numpy as np
import pytest

from solverkit.base import MultivariateObjective, make_gradient, make_hessian
from solverkit.exceptions import ConfigurationError
from solverkit.optimization import ExactHessian, HessianBFGS, HessianDFP
from solverkit.utils import is_pos_def


def sphere_objective(dim=3, with_hessian=False):
    F = lambda x: (x**2).sum()
    grad = make_gradient(F, dim, grad=lambda x: 2 * x)
    hess = make_hessian(F, dim, hess=lambda x: 2 * np.eye(dim)) if with_hessian else None
    return MultivariateObjective(F, grad, hess)


@pytest.mark.parametrize("cls", [HessianBFGS, HessianDFP])
def test_single_update_on_sphere(cls):
    hessian = cls(sphere_objective())
    hessian.initialize(np.array([1.0, 0.0, 0.0]))
    hessian.update(np.zeros(3))
    expected = np.eye(3)
    expected[0, 0] = 0.5
    assert np.allclose(hessian.inverse_hessian, expected)
    assert hessian.updates == 1 and hessian.skipped == 0


@pytest.mark.parametrize("cls", [HessianBFGS, HessianDFP])
def test_zero_step_is_skipped(cls):
    hessian = cls(sphere_objective())
    x = np.array([1.0, 2.0, 3.0])
    hessian.initialize(x)
    hessian.update(np.zeros(3))
    Q = hessian.Q.copy()
    hessian.update(np.zeros(3))
    assert np.array_equal(hessian.Q, Q)
    assert hessian.skipped == 1


def test_bfgs_secant_condition(rng):
    A = np.array([[3.0, 1.0, 0.0], [1.0, 2.0, 0.5], [0.0, 0.5, 1.0]])
    F = lambda x: 0.5 * x @ A @ x
    objective = MultivariateObjective(F, make_gradient(F, 3, grad=lambda x: A @ x))
    hessian = HessianBFGS(objective)
    x0, x1 = rng.standard_normal(3), rng.standard_normal(3)
    hessian.initialize(x0)
    hessian.update(x1)
    # the updated inverse maps the gradient change onto the step
    assert np.allclose(hessian.Q @ (A @ (x1 - x0)), x1 - x0)
    assert np.allclose(hessian.Q, hessian.Q.T)


@pytest.mark.parametrize("cls", [HessianBFGS, HessianDFP])
def test_inverse_stays_positive_definite(cls, rng):
    A = np.array([[4.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 2.0]])
    F = lambda x: 0.5 * x @ A @ x
    hessian = cls(MultivariateObjective(F, make_gradient(F, 3, grad=lambda x: A @ x)))
    hessian.initialize(rng.standard_normal(3))
    for _ in range(5):
        hessian.update(rng.standard_normal(3))
        assert is_pos_def(hessian.Q)
    assert hessian.updates == 5


def test_solve_is_matrix_vector_product():
    hessian = HessianBFGS(sphere_objective())
    hessian.initialize(np.ones(3))
    out = np.empty(3)
    hessian.solve(np.array([1.0, -2.0, 3.0]), out=out)
    assert np.array_equal(out, [1.0, -2.0, 3.0])


def test_exact_hessian_solves_newton_system():
    hessian = ExactHessian(sphere_objective(with_hessian=True))
    hessian.initialize(np.ones(3))
    assert np.allclose(hessian.H, 2 * np.eye(3))
    assert np.allclose(hessian.solve(np.array([2.0, 4.0, 6.0])), [1.0, 2.0, 3.0])


def test_exact_hessian_requires_provider():
    with pytest.raises(ConfigurationError):
        ExactHessian(sphere_objective())
