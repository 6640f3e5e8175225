"""Tests for the nonlinear solver's residual bookkeeping."""

import numpy as np
import pytest

from solverkit.config import Options
from solverkit.core import Status
from solverkit.exceptions import NumericalError
from solverkit.nonlinear import NonlinearSolverStatus


def test_residuals_after_update():
    status = NonlinearSolverStatus(2)
    status.initialize(np.array([1.0, 2.0]), np.array([3.0, 4.0]))
    assert status.rf_abs == 5.0
    assert np.isnan(status.rx_abs)

    status.update(np.array([2.0, 2.0]), np.array([0.0, 1.0]))
    assert status.rx_abs == pytest.approx(1.0)
    assert status.rx_rel == pytest.approx(1.0 / np.sqrt(8.0))
    assert status.rx_suc == pytest.approx(0.5)
    assert status.rf_abs == pytest.approx(1.0)
    assert status.rf_rel == pytest.approx(0.2)
    assert status.rf_suc == pytest.approx(np.sqrt(9.0 + 9.0))
    assert not status.f_increased


def test_successive_residual_with_zero_component():
    status = NonlinearSolverStatus(1)
    status.initialize(np.array([1.0]), np.array([1.0]))
    status.update(np.array([0.0]), np.array([0.5]))
    assert status.rx_suc == np.inf


def test_f_increase_and_termination_order():
    status = NonlinearSolverStatus(1)
    status.initialize(np.array([1.0]), np.array([1.0]))
    status.increase_iteration_number()
    status.update(np.array([2.0]), np.array([3.0]))
    assert status.f_increased
    assert status.termination_status(Options()) is Status.MAX_ITER
    assert status.termination_status(Options(allow_f_increases=False)) is Status.F_INCREASED
    assert status.termination_status(Options(f_abstol_break=2.0)) is Status.BREAK
    assert status.termination_status(Options(f_abstol=3.0)) is Status.CONVERGED


def test_convergence_flags():
    status = NonlinearSolverStatus(1)
    status.initialize(np.array([1.0]), np.array([1.0]))
    status.update(np.array([1.0]), np.array([1e-3]))
    assert status.assess_convergence(Options())
    assert status.x_converged
    assert not status.f_converged
    assert status.meets_stopping_criteria(Options())
    assert not status.meets_stopping_criteria(Options(min_iterations=1))


def test_nonfinite_residual_raises():
    status = NonlinearSolverStatus(2)
    status.initialize(np.array([1.0, 1.0]), np.array([1.0, np.inf]))
    assert status.f_isnan and not status.x_isnan
    with pytest.raises(NumericalError):
        status.meets_stopping_criteria(Options())


def test_summary_lists_residuals():
    status = NonlinearSolverStatus(1)
    status.initialize(np.array([1.0]), np.array([1.0]))
    status.update(np.array([0.5]), np.array([0.25]))
    assert "rf_abs" in str(status)
    assert set(status.residuals()) == {"rx_abs", "rx_rel", "rx_suc", "rf_abs", "rf_rel", "rf_suc"}
