"""Tests for Hessian providers."""

import numpy as np
import pytest

from solverkit.base import (
    HessianAutodiff,
    HessianFiniteDifferences,
    HessianFunction,
    check_hessian,
    hessian,
    make_gradient,
    make_hessian,
)
from solverkit.exceptions import ConfigurationError


def F(x):
    return x[0] ** 2 * x[1] + x[1] ** 3


def grad_F(x):
    return np.array([2 * x[0] * x[1], x[0] ** 2 + 3 * x[1] ** 2])


def hess_F(x):
    return np.array([[2 * x[1], 2 * x[0]], [2 * x[0], 6 * x[1]]])


def test_make_hessian_selects_provider():
    assert isinstance(make_hessian(F, 2), HessianAutodiff)
    assert isinstance(make_hessian(F, 2, mode="finite"), HessianFiniteDifferences)
    assert isinstance(make_hessian(F, 2, hess=hess_F), HessianFunction)
    with pytest.raises(ConfigurationError):
        make_hessian(F, 2, mode="function")


def test_providers_agree(rng):
    x = rng.standard_normal(2)
    expected = hess_F(x)
    assert np.allclose(hessian(x, make_hessian(F, 2)), expected, atol=1e-10)
    assert np.allclose(hessian(x, make_hessian(F, 2, mode="finite")), expected, atol=1e-5)


def test_finite_differences_of_user_gradient(rng):
    x = rng.standard_normal(2)
    provider = make_hessian(F, 2, mode="finite", gradient=make_gradient(F, 2, grad=grad_F))
    assert np.allclose(provider.evaluate(x), hess_F(x), atol=1e-6)


def test_finite_differences_are_symmetric(rng):
    x = rng.standard_normal(2)
    H = make_hessian(F, 2, mode="finite").evaluate(x)
    assert np.array_equal(H, H.T)


def test_default_step_is_quarter_power_of_eps():
    provider = HessianFiniteDifferences(F, 2)
    assert provider.eps == pytest.approx(np.finfo(np.float64).eps ** 0.25)


def test_gradient_dimension_mismatch():
    with pytest.raises(ConfigurationError):
        HessianFiniteDifferences(F, 2, gradient=make_gradient(F, 3, mode="finite"))


def test_inplace_user_hessian():
    def hess_inplace(out, x):
        out[...] = hess_F(x)

    provider = make_hessian(F, 2, hess=hess_inplace)
    assert provider.inplace
    assert np.array_equal(provider.evaluate(np.array([1.0, 2.0])), hess_F(np.array([1.0, 2.0])))


def test_check_hessian_report():
    report = check_hessian(np.array([[2.0, 0.0], [0.0, 4.0]]))
    assert report["min_abs"] == 0.0
    assert report["max_abs"] == 4.0
    assert report["cond"] == pytest.approx(2.0)
    assert report["det"] == pytest.approx(8.0)
    assert report["pos_def"] == 1.0
    assert check_hessian(np.array([[1.0, 2.0], [2.0, 1.0]]))["pos_def"] == 0.0
