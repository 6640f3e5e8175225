"""Function adapters and derivative providers."""

from .gradient import (
    Gradient,
    GradientAutodiff,
    GradientFiniteDifferences,
    GradientFunction,
    check_gradient,
    gradient,
    make_gradient,
)
from .hessian import (
    Hessian,
    HessianAutodiff,
    HessianFiniteDifferences,
    HessianFunction,
    check_hessian,
    hessian,
    make_hessian,
)
from .jacobian import (
    Jacobian,
    JacobianAutodiff,
    JacobianFiniteDifferences,
    JacobianFunction,
    check_jacobian,
    jacobian,
    make_jacobian,
)
from .objectives import AbstractObjective, MultivariateObjective, UnivariateObjective
from .providers import DEFAULT_MODE, MODES
from .systems import NonlinearSystem

__all__ = [
    "AbstractObjective",
    "DEFAULT_MODE",
    "Gradient",
    "GradientAutodiff",
    "GradientFiniteDifferences",
    "GradientFunction",
    "Hessian",
    "HessianAutodiff",
    "HessianFiniteDifferences",
    "HessianFunction",
    "Jacobian",
    "JacobianAutodiff",
    "JacobianFiniteDifferences",
    "JacobianFunction",
    "MODES",
    "MultivariateObjective",
    "NonlinearSystem",
    "UnivariateObjective",
    "check_gradient",
    "check_hessian",
    "check_jacobian",
    "gradient",
    "hessian",
    "jacobian",
    "make_gradient",
    "make_hessian",
    "make_jacobian",
]
