"""Integrate a single named reference problem (thin CLI glue).

Usage:
  python scripts/run_problem.py harmonic_oscillator --method improved_euler --dt 1e-2 --plot out/ho.png --save out/ho.npz

Policy:
- No numerics here: no systems/steppers/drivers.
- Orchestration only.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Allow running directly from a src-layout repo without installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import numpy as np

from odestep.simulate import IntegrationConfig, simulate
from odestep.steppers import list_steppers
from odestep.systems import list_problems, load_problem


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Integrate a reference ODE problem with a fixed-step stepper")
    p.add_argument("problem_name", choices=list_problems(), help="Reference problem name")
    p.add_argument("--method", choices=list_steppers(), default="improved_euler", help="Stepper (default: improved_euler)")
    p.add_argument("--dt", type=float, default=1e-2, help="Step size (default: 1e-2)")
    p.add_argument("--t-end", type=float, default=None, help="End time (default: problem's own)")
    p.add_argument("--plot", type=str, default=None, help="Save a trajectory plot to this path")
    p.add_argument("--save", type=str, default=None, help="Save trajectory to .npz")
    p.add_argument("--verbose", action="store_true", help="Print progress")
    return p.parse_args(argv)


def run(
    problem_name: str,
    method: str = "improved_euler",
    dt: float = 1e-2,
    t_end: float | None = None,
    plot_path=None,
    output_path=None,
    verbose: bool = False,
):
    problem = load_problem(problem_name)
    t_span = problem.t_span if t_end is None else (problem.t_span[0], float(t_end))

    config = IntegrationConfig(method=method, dt=float(dt), verbose=bool(verbose))
    result = simulate(problem, config, t_span)

    exact = problem.exact(t_span[1])
    err = float(np.max(np.abs(result.final_state - exact)))
    print(f"{problem.name}: {method}, dt={dt:g}, steps={result.nsteps}, nfev={result.nfev}, error={err:.3e}")

    if output_path is not None:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        np.savez(
            out,
            t=result.t,
            y=result.y,
            energy=(result.energy if result.energy is not None else np.array([])),
            nsteps=result.nsteps,
            nfev=result.nfev,
        )
        print(f"Saved: {out}")

    if plot_path is not None:
        from odestep.visualize import plot_trajectory, save_figure

        fig = plot_trajectory(result, exact=problem.exact)
        print(f"Wrote: {save_figure(fig, plot_path)}")

    return result


def main(argv=None) -> int:
    args = _parse_args(argv)

    run(
        problem_name=args.problem_name,
        method=args.method,
        dt=args.dt,
        t_end=args.t_end,
        plot_path=args.plot,
        output_path=args.save,
        verbose=args.verbose,
    )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
