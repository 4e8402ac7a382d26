"""Convergence study over several step sizes (thin CLI glue).

Runs every selected stepper on a reference problem for each dt, prints the
error table and optionally writes it as CSV and a log-log plot.

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

from odestep.convergence import convergence_table, estimate_order
from odestep.steppers import list_steppers
from odestep.systems import list_problems, load_problem


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Global error convergence study")
    p.add_argument("--problem", choices=list_problems(), default="exponential_decay", help="Reference problem (default: exponential_decay)")
    p.add_argument("--methods", nargs="*", default=None, help="Subset of steppers (default: all)")
    p.add_argument("--dts", type=float, nargs="+", default=[0.1, 0.05, 0.025, 0.0125], help="Step sizes")
    p.add_argument("--t-end", type=float, default=None, help="End time (default: problem's own)")
    p.add_argument("--csv", type=str, default=None, help="Write the table to this CSV file")
    p.add_argument("--plot", type=str, default=None, help="Write a log-log plot to this path")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)

    methods = args.methods if args.methods else list_steppers()
    unknown = sorted(set(methods) - set(list_steppers()))
    if unknown:
        raise SystemExit(f"Unknown methods: {', '.join(unknown)}. Choose from {list_steppers()}")

    problem = load_problem(args.problem)
    table = convergence_table(problem, methods, args.dts, t_end=args.t_end)
    print(table.to_string(index=False))

    if len(args.dts) >= 2:
        for method in methods:
            print(f"{method}: observed order {estimate_order(table, method):.3f}")

    if args.csv is not None:
        out = Path(args.csv)
        out.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(out, index=False)
        print(f"Wrote: {out}")

    if args.plot is not None:
        from odestep.visualize import plot_convergence, save_figure

        fig = plot_convergence(table)
        print(f"Wrote: {save_figure(fig, args.plot)}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
