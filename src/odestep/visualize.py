"""Lightweight plots for fixed-step integration results.

- plot_trajectory: state components against time, optionally with the exact solution
- plot_energy_drift: E(t) - E(t0) when the result carries energy diagnostics
- plot_convergence: log-log global error against dt, one line per method

All functions accept an optional Axes and return the Figure, so they can be
used headlessly (Agg backend) or composed into larger figures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

import numpy as np
import pandas as pd


def _axes(ax):
    if ax is not None:
        return ax.figure, ax
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(7.0, 4.5), constrained_layout=True)
    return fig, ax


def plot_trajectory(
    result,
    *,
    labels: Sequence[str] | None = None,
    exact: Optional[Callable[[float], np.ndarray]] = None,
    ax=None,
):
    """Plot every state component of a SimulationResult against time."""
    t = np.asarray(result.t, dtype=float)
    y = np.asarray(result.y, dtype=float)
    if y.ndim != 2 or y.shape[0] != t.shape[0]:
        raise ValueError("Expected t:(n,), y:(n,d)")
    if labels is not None and len(labels) != y.shape[1]:
        raise ValueError(f"Expected {y.shape[1]} labels, got {len(labels)}")

    fig, ax = _axes(ax)
    for j in range(y.shape[1]):
        label = labels[j] if labels is not None else f"x[{j}]"
        (line,) = ax.plot(t, y[:, j], "o-", ms=3, label=label)
        if exact is not None:
            t_fine = np.linspace(t[0], t[-1], max(200, 4 * t.shape[0]))
            y_fine = np.array([exact(ti)[j] for ti in t_fine])
            ax.plot(t_fine, y_fine, "--", color=line.get_color(), lw=1.0, label=f"{label} (exact)")

    ax.set_xlabel("t")
    ax.set_ylabel("state")
    ax.grid(True, ls=":")
    ax.legend()
    return fig


def plot_energy_drift(result, *, ax=None):
    """Plot the energy drift recorded by the driver."""
    if result.energy_drift is None:
        raise ValueError("result has no energy diagnostics")

    fig, ax = _axes(ax)
    ax.plot(result.t, result.energy_drift, "-")
    ax.set_xlabel("t")
    ax.set_ylabel("E(t) - E(t0)")
    ax.grid(True, ls=":")
    return fig


def plot_convergence(table: pd.DataFrame, *, ax=None, reference_orders: Sequence[int] = (1, 2)):
    """Log-log plot of global error against dt from `convergence_table`."""
    if table.empty:
        raise ValueError("table is empty")

    fig, ax = _axes(ax)
    for method, sub in table.groupby("method", sort=False):
        ax.loglog(sub["dt"], sub["error"], "o-", label=str(method))

    # Reference slopes anchored at the coarsest point of the first method.
    dts = np.sort(table["dt"].unique())
    first = table[table["method"] == table["method"].iloc[0]]
    dt_anchor = float(first["dt"].max())
    err_anchor = float(first.loc[first["dt"].idxmax(), "error"])
    for p in reference_orders:
        ax.loglog(dts, err_anchor * (dts / dt_anchor) ** p, "k--", lw=0.8, alpha=0.6, label=f"O(dt^{p}) ref")

    ax.set_xlabel("Step size dt")
    ax.set_ylabel("Global error")
    ax.set_title("Convergence")
    ax.grid(True, which="both", ls=":")
    ax.legend()
    return fig


def save_figure(fig, path: Path | str, *, dpi: int = 150) -> Path:
    """Save a figure, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi)
    return path
