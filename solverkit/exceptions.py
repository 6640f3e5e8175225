"""Exception types raised by solverkit."""

from __future__ import annotations

import numpy as np


class ConfigurationError(ValueError):
    """Invalid setup: bad options, wrong signatures or mismatched dimensions."""


class NumericalError(ArithmeticError):
    """A non-finite iterate, value or gradient that cannot be recovered from."""


class SingularMatrixError(np.linalg.LinAlgError):
    """Raised by the linear solvers when a pivot vanishes."""


__all__ = ["ConfigurationError", "NumericalError", "SingularMatrixError"]
