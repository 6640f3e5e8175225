"""Tests for logging utilities."""

import logging
from io import StringIO

import numpy as np

from solverkit import Options, bfgs, newton_solve
from solverkit.logging import configure_logging, get_logger, set_log_level


def test_get_logger_returns_logger():
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name.startswith("solverkit.")


def test_get_logger_caching():
    assert get_logger("test_module") is get_logger("test_module")


def test_get_logger_keeps_package_prefix():
    assert get_logger("solverkit.optimization").name == "solverkit.optimization"
    assert get_logger().name == "solverkit"


def test_logger_does_not_propagate():
    assert get_logger("test_module").propagate is False


def test_logger_output():
    captured = StringIO()
    try:
        configure_logging(level=logging.INFO, stream=captured)
        get_logger("test_module").info("Test message")
        output = captured.getvalue()
        assert "Test message" in output
        assert "test_module" in output
    finally:
        configure_logging(level=logging.WARNING)


def test_set_log_level():
    logger = get_logger("test_module")
    set_log_level(logging.INFO)
    assert logger.level == logging.INFO
    set_log_level("warning")
    assert logger.level == logging.WARNING


def test_verbosity_zero_is_silent(log_stream):
    bfgs(lambda x: (x**2).sum(), np.array([1.0, -1.0]), verbosity=0)
    assert log_stream.getvalue() == ""


def test_verbosity_one_reports_termination(log_stream):
    res = bfgs(lambda x: (x**2).sum(), np.array([1.0, -1.0]), verbosity=1)
    assert res.success
    assert "Convergence criteria satisfied" in log_stream.getvalue()


def test_verbosity_two_traces_iterations(log_stream):
    res = newton_solve(lambda x: x**2 - 2.0, np.array([1.0]), options=Options(verbosity=2))
    lines = [line for line in log_stream.getvalue().splitlines() if "rx_abs=" in line]
    assert len(lines) == res.nit


def test_warn_iterations(log_stream):
    newton_solve(lambda x: x**2 - 2.0, np.array([1.0]), warn_iterations=1, verbosity=0)
    assert "iterations" in log_stream.getvalue()
    assert "[WARNING]" in log_stream.getvalue()
