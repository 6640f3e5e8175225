"""Tests for Jacobian providers."""

import numpy as np
import pytest

from solverkit.base import (
    JacobianAutodiff,
    JacobianFiniteDifferences,
    JacobianFunction,
    check_jacobian,
    jacobian,
    make_jacobian,
)
from solverkit.exceptions import ConfigurationError


def F(x):
    return x * x.sum()


def jac_F(x):
    return x.sum() * np.eye(x.size) + np.outer(x, np.ones(x.size))


def test_make_jacobian_selects_provider():
    assert isinstance(make_jacobian(F, 3), JacobianAutodiff)
    assert isinstance(make_jacobian(F, 3, mode="finite"), JacobianFiniteDifferences)
    assert isinstance(make_jacobian(F, 3, jac=jac_F, mode="autodiff"), JacobianFunction)


def test_providers_agree(rng):
    x = rng.standard_normal(3)
    expected = jac_F(x)
    assert np.allclose(jacobian(x, make_jacobian(F, 3)), expected, atol=1e-12)
    assert np.allclose(jacobian(x, make_jacobian(F, 3, mode="finite")), expected, atol=1e-6)


def test_inplace_function_with_finite_differences(rng):
    def F_inplace(y, x):
        y[...] = x * x.sum()

    x = rng.standard_normal(3)
    J = make_jacobian(F_inplace, 3, mode="finite", inplace=True).evaluate(x)
    assert np.allclose(J, jac_F(x), atol=1e-6)


def test_inplace_function_cannot_be_autodiffed():
    with pytest.raises(ConfigurationError):
        make_jacobian(lambda y, x: None, 2, mode="autodiff", inplace=True)


def test_params_are_forwarded():
    def G(x, p):
        return p * x

    def jac_G(x, p):
        return p * np.eye(2)

    x = np.array([1.0, 2.0])
    assert np.allclose(make_jacobian(G, 2, params=3.0).evaluate(x), 3 * np.eye(2))
    assert np.allclose(make_jacobian(G, 2, mode="finite", params=3.0).evaluate(x), 3 * np.eye(2))
    assert np.array_equal(make_jacobian(G, 2, jac=jac_G, params=3.0).evaluate(x), 3 * np.eye(2))


def test_rectangular_jacobian():
    def H(x):
        return np.array([x[0], x[1], x[0] * x[1]])

    provider = make_jacobian(H, 2, 3, mode="finite")
    assert provider.shape == (3, 2)
    J = provider.evaluate(np.array([2.0, 3.0]))
    assert np.allclose(J, [[1.0, 0.0], [0.0, 1.0], [3.0, 2.0]], atol=1e-6)


def test_autodiff_output_size_mismatch():
    provider = make_jacobian(F, 3, 2)
    with pytest.raises(ConfigurationError):
        provider.evaluate(np.ones(3))


def test_function_mode_requires_jacobian():
    with pytest.raises(ConfigurationError):
        make_jacobian(F, 3, mode="function")


def test_check_jacobian_rectangular():
    report = check_jacobian(np.array([[1.0, -5.0, 2.0]]))
    assert report == {"min_abs": 1.0, "max_abs": 5.0}
