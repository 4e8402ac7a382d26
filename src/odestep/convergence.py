"""Convergence study for the fixed-step steppers.

Integrates a reference problem with decreasing step sizes and compares the
final state against the exact solution. For a stepper of order p the global
error behaves like C * dt^p, so the slope of log(error) against log(dt)
estimates p.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import math

import numpy as np
import pandas as pd

from .simulate import IntegrationConfig, simulate
from .systems import ReferenceProblem

TABLE_COLUMNS = ["method", "dt", "nsteps", "nfev", "error", "observed_order"]


def global_error(
    problem: ReferenceProblem, method: str, dt: float, *, t_end: float | None = None
) -> Tuple[float, int, int]:
    """Max-norm error of the final state against the exact solution.

    Returns:
        error: max_i |y_i(t_end) - exact_i(t_end)|
        nsteps: Number of steps taken.
        nfev: Number of system evaluations.
    """
    t0 = float(problem.t_span[0])
    t1 = float(problem.t_span[1] if t_end is None else t_end)

    config = IntegrationConfig(method=method, dt=float(dt), record=False)
    result = simulate(problem, config, (t0, t1))

    err = np.abs(result.final_state - np.asarray(problem.exact(t1), dtype=float))
    return float(np.max(err)), result.nsteps, result.nfev


def convergence_table(
    problem: ReferenceProblem,
    methods: Iterable[str] = ("euler", "improved_euler"),
    dts: Sequence[float] = (0.1, 0.05, 0.025, 0.0125),
    *,
    t_end: float | None = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """Tabulate global error for each method and step size.

    `observed_order` is the local slope log(e_prev / e) / log(dt_prev / dt)
    between consecutive step sizes (NaN for the first, coarsest row).
    """
    dts = sorted((float(dt) for dt in dts), reverse=True)
    if not dts:
        raise ValueError("dts must contain at least one step size")

    rows = []
    for method in methods:
        prev_dt = None
        prev_err = None
        for dt in dts:
            err, nsteps, nfev = global_error(problem, method, dt, t_end=t_end)

            order = float("nan")
            if prev_err is not None and err > 0.0 and prev_err > 0.0:
                order = math.log(prev_err / err) / math.log(prev_dt / dt)

            rows.append(
                {
                    "method": method,
                    "dt": dt,
                    "nsteps": nsteps,
                    "nfev": nfev,
                    "error": err,
                    "observed_order": order,
                }
            )
            if verbose:
                print(f"{method:<16} | dt = {dt:<10.4g} | error = {err:<12.4e} | order = {order:.3f}")

            prev_dt, prev_err = dt, err

    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def estimate_order(table: pd.DataFrame, method: str) -> float:
    """Least-squares slope of log(error) against log(dt) for one method."""
    sub = table[(table["method"] == method) & (table["error"] > 0.0)]
    if len(sub) < 2:
        raise ValueError(f"Need at least two nonzero errors for method '{method}'")

    slope, _intercept = np.polyfit(np.log(sub["dt"].to_numpy()), np.log(sub["error"].to_numpy()), 1)
    return float(slope)
