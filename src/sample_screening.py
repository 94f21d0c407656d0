# sample_screening.py
# -----------------------------------------------------------------------------
# Batch runner: regenerate and analyse every sample, tabulate the results
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List
import logging
import numpy as np
import pandas as pd

from viscometry_config import ModelParams
from flow_curve import FlowCurve, NOISE_AMPLITUDE, generate_flow_curve
from sample_analysis import AnalysisResult, analyze_sample

__all__ = [
    "SampleRun",
    "run_samples",
    "results_table",
    "merged_curves",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleRun:
    params: ModelParams
    curve: FlowCurve
    result: AnalysisResult

# -----------------------------------------------------------------------------
# 1) Main routine
# -----------------------------------------------------------------------------

def run_samples(
    samples: Iterable[ModelParams],
    *,
    point_count: int = 50,
    rng: np.random.Generator | None = None,
    noise_amplitude: float = NOISE_AMPLITUDE,
) -> List[SampleRun]:
    """Generate and analyse each sample from scratch, keeping input order.

    One generator feeds every curve, so a seeded *rng* pins the whole batch.
    """
    if rng is None and noise_amplitude:
        rng = np.random.default_rng()

    runs: List[SampleRun] = []
    for params in samples:
        curve = generate_flow_curve(params, point_count,
                                    rng=rng, noise_amplitude=noise_amplitude)
        result = analyze_sample(params, curve)
        logger.info(
            f"{params.sample_id}: n={result.flow_behavior_index:.3f}, "
            f"cluster={result.cluster_length_scale:.2f}, "
            f"newtonian={result.is_newtonian}"
        )
        runs.append(SampleRun(params=params, curve=curve, result=result))
    return runs

# -----------------------------------------------------------------------------
# 2) Tables for display and export
# -----------------------------------------------------------------------------

def results_table(runs: List[SampleRun]) -> pd.DataFrame:
    """One row per sample: model inputs next to the derived metrics."""
    rows = []
    for run in runs:
        p, r = run.params, run.result
        rows.append({
            "sample_id": p.sample_id,
            "name": p.name,
            "eta0": p.zero_shear_viscosity,
            "eta_inf": p.infinite_shear_viscosity,
            "lambda_s": p.relaxation_time,
            "n_model": p.power_index,
            "flow_behavior_index": r.flow_behavior_index,
            "cluster_length_scale": r.cluster_length_scale,
            "is_newtonian": r.is_newtonian,
        })
    return pd.DataFrame(rows, columns=[
        "sample_id", "name", "eta0", "eta_inf", "lambda_s", "n_model",
        "flow_behavior_index", "cluster_length_scale", "is_newtonian",
    ])


def merged_curves(runs: List[SampleRun], column: str = "viscosity") -> pd.DataFrame:
    """Curves side by side on their shared shear-rate grid, one column per sample."""
    if not runs:
        return pd.DataFrame()

    gdot = runs[0].curve.shear_rates
    data = {}
    for run in runs:
        if not np.array_equal(run.curve.shear_rates, gdot):
            raise ValueError(
                f"{run.params.sample_id} was sampled on a different shear-rate grid"
            )
        if run.params.sample_id in data:
            raise ValueError(f"duplicate sample_id {run.params.sample_id!r}")
        data[run.params.sample_id] = run.curve.to_frame()[column].to_numpy()

    frame = pd.DataFrame(data, index=pd.Index(gdot, name="shear_rate"))
    return frame
