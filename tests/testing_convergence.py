import sys
from pathlib import Path
# Go up to the parent directory (..), then down into "src"
# This adds "../src" to the python search path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import numpy as np
import pandas as pd
import pytest

from odestep.convergence import TABLE_COLUMNS, convergence_table, estimate_order, global_error
from odestep.systems import exponential_decay, harmonic_oscillator


def test_improved_euler_beats_euler_on_decay():
    """dx/dt = -x, x(0) = 1: Heun's global error is smaller at equal dt."""
    problem = exponential_decay()
    for dt in (0.1, 0.05, 0.01):
        err_euler, _, _ = global_error(problem, "euler", dt)
        err_heun, _, _ = global_error(problem, "improved_euler", dt)
        assert err_heun < err_euler


def test_global_error_reports_work():
    err, nsteps, nfev = global_error(exponential_decay(), "improved_euler", 0.1)
    assert nsteps == 10
    assert nfev == 20
    assert 0.0 < err < 1e-3


def test_table_layout():
    table = convergence_table(exponential_decay(), dts=[0.05, 0.1])
    assert isinstance(table, pd.DataFrame)
    assert list(table.columns) == TABLE_COLUMNS
    assert len(table) == 4
    # Coarsest step first within each method.
    assert list(table["dt"]) == [0.1, 0.05, 0.1, 0.05]
    assert np.isnan(table["observed_order"].iloc[0])


def test_observed_orders_decay():
    print("Running convergence test on x' = -x...")
    table = convergence_table(exponential_decay(), dts=[0.1, 0.05, 0.025, 0.0125, 0.00625])
    print(table.to_string(index=False))

    slope_euler = estimate_order(table, "euler")
    slope_heun = estimate_order(table, "improved_euler")
    print(f"Euler slope: {slope_euler:.4f}, Improved Euler slope: {slope_heun:.4f}")

    assert 0.85 < slope_euler < 1.15
    # Reported order_step() is 1, the measured global order is 2.
    assert 1.85 < slope_heun < 2.15


def test_observed_orders_oscillator():
    table = convergence_table(harmonic_oscillator(), dts=[0.02, 0.01, 0.005])
    assert 0.8 < estimate_order(table, "euler") < 1.2
    assert 1.8 < estimate_order(table, "improved_euler") < 2.2


def test_estimate_order_needs_two_points():
    table = convergence_table(exponential_decay(), methods=["euler"], dts=[0.1])
    with pytest.raises(ValueError):
        estimate_order(table, "euler")


def test_empty_dts_rejected():
    with pytest.raises(ValueError):
        convergence_table(exponential_decay(), dts=[])
