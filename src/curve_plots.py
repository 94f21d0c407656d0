"""
curve_plots.py – PNG export of flow curves
==========================================

Linear (η vs γ̇) and log-log views of a batch of :class:`SampleRun`. The
log-log view is where the high-shear slope, and so the flow behaviour index,
can be read off directly.
"""
from __future__ import annotations

from pathlib import Path
from typing import List
import matplotlib.pyplot as plt

from sample_screening import SampleRun

__all__ = ["plot_flow_curves"]


def plot_flow_curves(runs: List[SampleRun], path: Path, *, loglog: bool = False) -> Path:
    """Draw every run's viscosity curve and save it to *path* (dpi 300)."""
    fig = plt.figure(figsize=(5.8, 3.5))
    ax = fig.add_subplot(111)
    for run in runs:
        style = dict(color=run.params.color, label=run.params.name)
        if loglog:
            ax.loglog(run.curve.shear_rates, run.curve.viscosities, "o-", ms=3, **style)
        else:
            ax.plot(run.curve.shear_rates, run.curve.viscosities, "-", **style)

    ax.set_xlabel("Shear rate [1/s]")
    ax.set_ylabel("Viscosity [cP]")
    ax.set_title("Flow curves (log-log)" if loglog else "Flow curves")
    ax.grid(True, ls="--", alpha=.3)
    if runs:
        ax.legend()
    fig.tight_layout()

    path = Path(path)
    fig.savefig(path, dpi=300)
    plt.close(fig)
    return path
