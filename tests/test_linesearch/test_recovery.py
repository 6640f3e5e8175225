"""Tests for the line search driver's handling of non-finite trial steps."""

import numpy as np
import pytest

from solverkit.exceptions import ConfigurationError, NumericalError
from solverkit.linesearch import Backtracking, Linesearch, LinesearchProblem, Static


def nan_beyond(limit):
    return LinesearchProblem(
        lambda a: np.nan if a > limit else (a - 0.3) ** 2,
        lambda a: 2 * (a - 0.3),
    )


def test_static_step_is_shrunk_until_finite(log_stream):
    alpha = Linesearch(Static())(nan_beyond(0.3))
    assert alpha == 0.25
    assert log_stream.getvalue().count("decreasing alpha") == 2


def test_backtracking_after_recovery():
    alpha = Linesearch(Backtracking())(nan_beyond(0.7))
    assert alpha == 0.5


def test_recovery_from_overflow(log_stream):
    def phi(a):
        if a > 0.3:
            raise OverflowError("overflow")
        return a

    alpha = Linesearch(Static())(LinesearchProblem(phi, lambda a: 1.0))
    assert alpha == 0.25
    assert "OverflowError" in log_stream.getvalue()


def test_recovery_gives_up():
    problem = LinesearchProblem(lambda a: np.inf, lambda a: 0.0)
    with pytest.raises(NumericalError):
        Linesearch(Static(), rmax=3)(problem)


def test_configuration_errors_are_not_recovered():
    def phi(a):
        raise ConfigurationError("bad setup")

    with pytest.raises(ConfigurationError):
        Linesearch(Static())(LinesearchProblem(phi, lambda a: 0.0))


def test_explicit_initial_step():
    assert Linesearch(Static())(nan_beyond(0.3), alpha0=0.2) == 0.2


def test_recovery_from_zero_division(log_stream):
    # pole at alpha = 1 in plain float arithmetic
    problem = LinesearchProblem(lambda a: a / (1.0 - a), lambda a: 1.0 / (1.0 - a) ** 2)
    alpha = Linesearch(Static())(problem)
    assert alpha == 0.5
    assert "ZeroDivisionError" in log_stream.getvalue()
