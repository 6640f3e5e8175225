"""Bracketing of scalar minima and roots."""

from __future__ import annotations

from typing import Callable, Optional

from ..config import Options
from ..exceptions import NumericalError
from .base import DEFAULT_BRACKETING_K, DEFAULT_BRACKETING_NMAX, DEFAULT_BRACKETING_S

MAX_STEP_REDUCTIONS = 5

ScalarFunction = Callable[[float], float]


def bracket_minimum(
    f: ScalarFunction,
    x: float = 0.0,
    s: float = DEFAULT_BRACKETING_S,
    k: float = DEFAULT_BRACKETING_K,
    nmax: int = DEFAULT_BRACKETING_NMAX,
) -> tuple[float, float]:
    """Return ``(a, c)`` with ``a < c`` enclosing a local minimum of ``f``.

    Walks downhill from ``x`` with steps growing by a factor ``k``.
    """
    a, ya = x, f(x)
    b, yb = a + s, f(a + s)
    if yb > ya:
        a, b = b, a
        ya, yb = yb, ya
        s = -s
    for _ in range(nmax):
        c, yc = b + s, f(b + s)
        if yc > yb:
            return (a, c) if a < c else (c, a)
        a, ya, b, yb = b, yb, c, yc
        s *= k
    raise NumericalError(f"Unable to bracket a minimum starting at x = {x}.")


def bracket_root(
    f: ScalarFunction,
    x: float = 0.0,
    s: float = DEFAULT_BRACKETING_S,
    k: float = DEFAULT_BRACKETING_K,
    nmax: int = DEFAULT_BRACKETING_NMAX,
) -> tuple[float, float]:
    """Return ``(a, b)`` with ``f(a) * f(b) <= 0``.

    Starting from ``[x, x + s]``, the end with the smaller ``|f|`` is pushed
    outwards by ``k`` times the interval width until the signs differ.
    """
    a, b = x, x + s
    fa, fb = f(a), f(b)
    for _ in range(nmax):
        if fa * fb <= 0:
            return a, b
        if abs(fa) < abs(fb):
            a += k * (a - b)
            fa = f(a)
        else:
            b += k * (b - a)
            fb = f(b)
    raise NumericalError(f"Unable to bracket a root starting at x = {x}.")


def find_decrease(f: ScalarFunction, x: float = 0.0, delta: float = DEFAULT_BRACKETING_S) -> Optional[float]:
    """First of ``delta, delta / 2, ..., delta / 2**5`` with ``f(x + step) < f(x)``, or ``None``."""
    f0 = f(x)
    for _ in range(MAX_STEP_REDUCTIONS + 1):
        if f(x + delta) < f0:
            return delta
        delta /= 2
    return None


def triple_point_finder(
    f: ScalarFunction,
    x: float = 0.0,
    delta: float = DEFAULT_BRACKETING_S,
    nmax: int = DEFAULT_BRACKETING_NMAX,
) -> tuple[float, float, float]:
    """Find ``a < b < c`` with ``f(b) <= f(a)`` and ``f(b) < f(c)``.

    ``f`` must decrease at ``x``; the initial step ``delta`` is halved up to
    five times to find a decrease, after which steps are doubled until the
    function goes up again.
    """
    step = find_decrease(f, x, delta)
    if step is None:
        smallest = delta / 2**MAX_STEP_REDUCTIONS
        raise NumericalError(f"f must be decreasing at x = {x}; no step down to {smallest} lowers f.")
    delta = step

    a, b = x, x + delta
    fb = f(b)
    increment = delta
    for _ in range(nmax):
        increment *= 2
        c = b + increment
        fc = f(c)
        if fc > fb:
            return a, b, c
        a, b, fb = b, c, fc
    raise NumericalError(f"Unable to find a triple point for quadratic line search starting at x = {x}.")


def bisection(f: ScalarFunction, a: float, b: float, options: Options | None = None) -> float:
    """Root of ``f`` in ``[a, b]`` by bisection.

    Stops when ``|f| <= f_abstol``, when the interval is narrower than
    ``x_abstol`` or after ``max_iterations`` halvings.
    """
    options = Options() if options is None else options
    if a > b:
        a, b = b, a
    fa = f(a)
    x = a
    for _ in range(options.max_iterations):
        x = 0.5 * (a + b)
        y = f(x)
        if abs(y) <= options.f_abstol:
            break
        if fa * y > 0:
            a, fa = x, y
        else:
            b = x
        if b - a <= options.x_abstol:
            break
    return x


__all__ = ["bisection", "bracket_minimum", "bracket_root", "find_decrease", "triple_point_finder"]
