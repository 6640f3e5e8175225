"""Unconstrained minimization with Newton, BFGS and DFP directions.

Example
-------
>>> import numpy as np
>>> from solverkit.optimization import bfgs
>>> def bowl(x):
...     return (x[0] - 1.0)**2 + 2 * (x[1] + 0.5)**2 + (x[0] - 1.0)**4
>>> res = bfgs(bowl, np.zeros(2))
>>> bool(np.allclose(res.x, [1.0, -0.5], atol=1e-5))
True
"""

from .cache import NewtonOptimizerCache
from .hessians import ExactHessian, HessianApproximation, HessianBFGS, HessianDFP, IterativeHessian
from .optimizer import BFGS, DFP, Newton, Optimizer, OptimizerMethod, bfgs, dfp, minimize, newton_method
from .status import OptimizerStatus

__all__ = [
    "BFGS",
    "DFP",
    "ExactHessian",
    "HessianApproximation",
    "HessianBFGS",
    "HessianDFP",
    "IterativeHessian",
    "Newton",
    "NewtonOptimizerCache",
    "Optimizer",
    "OptimizerMethod",
    "OptimizerStatus",
    "bfgs",
    "dfp",
    "minimize",
    "newton_method",
]
