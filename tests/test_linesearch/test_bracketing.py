"""Tests for bracketing, scalar bisection and the Wolfe conditions."""

import pytest

from solverkit.config import Options
from solverkit.exceptions import ConfigurationError, NumericalError
from solverkit.linesearch import (
    CurvatureCondition,
    LinesearchProblem,
    SufficientDecreaseCondition,
    bisection,
    bracket_minimum,
    bracket_root,
    find_decrease,
    triple_point_finder,
)


def test_bracket_minimum_walks_downhill():
    a, c = bracket_minimum(lambda x: (x - 2.0) ** 2)
    assert a < 2.0 < c


def test_bracket_minimum_walks_left():
    a, c = bracket_minimum(lambda x: (x + 1.0) ** 2, x=0.5)
    assert a < -1.0 < c


def test_bracket_minimum_unbounded():
    with pytest.raises(NumericalError):
        bracket_minimum(lambda x: -x, nmax=10)


def test_bracket_root():
    f = lambda x: x - 5.0
    a, b = bracket_root(f)
    assert f(a) * f(b) <= 0


def test_bracket_root_without_sign_change():
    with pytest.raises(NumericalError):
        bracket_root(lambda x: x**2 + 1.0, nmax=10)


def test_triple_point_finder():
    f = lambda x: (x - 0.3) ** 2
    a, b, c = triple_point_finder(f)
    assert a < b < c
    assert f(b) <= f(a) and f(b) < f(c)


def test_triple_point_finder_needs_descent():
    with pytest.raises(NumericalError):
        triple_point_finder(lambda x: x**2)


def test_find_decrease_halves_step():
    assert find_decrease(lambda x: (x - 0.3) ** 2) == 0.01
    assert find_decrease(lambda x: (x - 0.004) ** 2) == 0.01 / 2
    assert find_decrease(lambda x: x**2) is None
    assert find_decrease(lambda x: 1000.0 - 1e-20 * x) is None


def test_scalar_bisection():
    assert bisection(lambda x: x - 0.5, 0.0, 1.0) == 0.5
    root = bisection(lambda x: x**3 - 2.0, 2.0, 0.0)
    assert root == pytest.approx(2.0 ** (1 / 3), abs=1e-12)
    coarse = bisection(lambda x: x**3 - 2.0, 0.0, 2.0, Options(max_iterations=5))
    assert abs(coarse - 2.0 ** (1 / 3)) < 2.0 / 2**5


def test_sufficient_decrease_condition():
    problem = LinesearchProblem(lambda a: (a - 0.3) ** 2, lambda a: 2 * (a - 0.3))
    sdc = SufficientDecreaseCondition(problem, problem.value(0.0), problem.derivative(0.0))
    assert sdc(0.5)
    assert not sdc(1.0)
    with pytest.raises(ConfigurationError):
        SufficientDecreaseCondition(problem, 0.0, -1.0, c1=1.5)


def test_curvature_conditions():
    problem = LinesearchProblem(lambda a: (a - 0.3) ** 2, lambda a: 2 * (a - 0.3))
    d0 = problem.derivative(0.0)
    standard = CurvatureCondition(problem, d0)
    strong = CurvatureCondition(problem, d0, mode="strong")
    assert standard(1.0) and not strong(1.0)
    assert standard(0.3) and strong(0.3)
    assert not standard(0.0)
    with pytest.raises(ConfigurationError):
        CurvatureCondition(problem, d0, mode="weak")
