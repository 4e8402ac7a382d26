"""Fixed-step simulation driver.

This module is stepper- and problem-agnostic:
- You provide the system(x, dxdt, t)
- You provide a stepper exposing adjust_size / do_step
- The driver owns the loop and the step size

Recorded diagnostics:
- time points
- states
- number of steps taken
- total system evaluation count
- optional energy + drift from initial value
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import math

import numpy as np

from .state import DynamicState
from .stepper_base import Stepper, System

Observer = Callable[[Any, float], None]
EnergyFn = Callable[[np.ndarray], float]

# Relative slack when counting steps, so t_span / dt that is an integer up to
# rounding does not produce an extra sliver step.
_STEP_SLACK = 1e-9


@dataclass(frozen=True)
class IntegrationConfig:
    """Configuration for fixed-step integration."""

    method: str = "improved_euler"
    dt: float = 1e-2
    max_steps: int = 1_000_000

    # Keep every intermediate state; otherwise only the first and last.
    record: bool = True
    verbose: bool = False


@dataclass(frozen=True)
class SimulationResult:
    t: np.ndarray
    y: np.ndarray
    nsteps: int
    nfev: int
    energy: Optional[np.ndarray]
    energy_drift: Optional[np.ndarray]

    @property
    def final_state(self) -> np.ndarray:
        return self.y[-1]


def _snapshot(x: Any) -> np.ndarray:
    return np.array(x, dtype=float).reshape(-1)


def integrate_const(
    stepper: Stepper,
    system: System,
    x: Any,
    t_span: Sequence[float],
    *,
    dt: float,
    observer: Observer | None = None,
    energy_fn: EnergyFn | None = None,
    record: bool = True,
    max_steps: int = 1_000_000,
    verbose: bool = False,
) -> SimulationResult:
    """Integrate x' = f(x, t) on [t0, t1] with a constant step size.

    The state is advanced in place; on return `x` holds the state at t1.
    The last step is shortened so the integration ends exactly at t1, and
    t1 < t0 integrates backwards in time.

    Args:
        stepper: Fixed-step stepper. `adjust_size(x)` is called once.
        system: In-place system(x, dxdt, t).
        x: State vector, mutated in place.
        t_span: (t0, t1).
        dt: Step size magnitude.
        observer: Called as observer(x, t) at t0 and after every step.
        energy_fn: Optional energy function E(y) for diagnostics.
        record: Keep all states (True) or only the first and last.
        max_steps: Hard limit on the number of steps.
        verbose: Print progress lines.

    Returns:
        SimulationResult with the recorded trajectory and diagnostics.
    """
    if len(t_span) != 2:
        raise ValueError("t_span must be a 2-sequence (t0, t1)")
    if not dt > 0.0 or not math.isfinite(dt):
        raise ValueError("dt must be positive and finite")
    if max_steps <= 0:
        raise ValueError("max_steps must be positive")

    t0 = float(t_span[0])
    t1 = float(t_span[1])

    span = t1 - t0
    n_steps = 0
    if span != 0.0:
        # A subnormal dt overflows the ratio; that is still too many steps.
        ratio = abs(span) / dt - _STEP_SLACK
        if not math.isfinite(ratio) or ratio > max_steps:
            raise RuntimeError(f"Exceeded max_steps={max_steps}: span {abs(span):g} needs more steps of dt={dt}")
        n_steps = max(1, int(math.ceil(ratio)))

    nfev = 0

    def counted_system(x_in: Any, dxdt_out: Any, t: float) -> None:
        nonlocal nfev
        nfev += 1
        system(x_in, dxdt_out, t)

    stepper.adjust_size(x)

    y0 = _snapshot(x)
    t_hist: list[float] = [t0]
    y_hist: list[np.ndarray] = [y0]
    e_hist: list[float] = []
    if energy_fn is not None:
        e_hist.append(float(energy_fn(y0)))

    if observer is not None:
        observer(x, t0)

    h = math.copysign(float(dt), span) if span != 0.0 else 0.0
    report_every = max(1, n_steps // 10)

    for k in range(n_steps):
        t = t0 + k * h
        last = k == n_steps - 1
        # Never step past the end.
        h_k = (t1 - t) if last else h
        stepper.do_step(counted_system, x, t, h_k)
        t_next = t1 if last else t0 + (k + 1) * h

        if observer is not None:
            observer(x, t_next)

        if record or last:
            y = _snapshot(x)
            t_hist.append(t_next)
            y_hist.append(y)
            if energy_fn is not None:
                e_hist.append(float(energy_fn(y)))

        if verbose and ((k + 1) % report_every == 0 or last):
            print(f"step {k + 1:>8}/{n_steps} | t = {t_next:<12.6g} | nfev = {nfev}")

    energy_arr = None
    drift_arr = None
    if energy_fn is not None:
        energy_arr = np.asarray(e_hist, dtype=float)
        drift_arr = energy_arr - float(energy_arr[0])

    return SimulationResult(
        t=np.asarray(t_hist, dtype=float),
        y=np.vstack(y_hist).astype(float, copy=False),
        nsteps=int(n_steps),
        nfev=int(nfev),
        energy=energy_arr,
        energy_drift=drift_arr,
    )


def simulate(
    problem,
    config: IntegrationConfig | None = None,
    t_span: Sequence[float] | None = None,
) -> SimulationResult:
    """Convenience wrapper to integrate a `ReferenceProblem` with a named stepper.

    Scripts are expected to call this function and should not build steppers
    or state containers directly.
    """
    # Local import keeps the driver itself independent of the stepper registry.
    from .steppers import get_stepper

    if config is None:
        config = IntegrationConfig()
    if t_span is None:
        t_span = problem.t_span

    stepper = get_stepper(config.method)
    x = DynamicState(problem.y0)

    return integrate_const(
        stepper,
        problem.system,
        x,
        t_span,
        dt=float(config.dt),
        energy_fn=problem.energy,
        record=bool(config.record),
        max_steps=int(config.max_steps),
        verbose=bool(config.verbose),
    )
