from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence, Union
import logging
import numpy as np

from flow_curve import DegenerateCurveError, FlowCurve, RheologyPoint
from viscometry_config import ModelParams

__all__ = [
    "AnalysisResult",
    "high_shear_tail",
    "flow_behavior_index",
    "cluster_length_scale",
    "analyze_sample",
]

logger = logging.getLogger(__name__)

HIGH_SHEAR_DIVISOR = 5        # tail = last ceil(N / 5) points
NEWTONIAN_TOLERANCE = 0.05

# Calibration constants of the toy cluster metric
CLUSTER_LAMBDA_WEIGHT = 10.0
CLUSTER_THINNING_WEIGHT = 50.0


@dataclass(frozen=True)
class AnalysisResult:
    sample_id: str
    flow_behavior_index: float
    cluster_length_scale: float
    is_newtonian: bool

    def to_dict(self) -> Dict[str, Union[str, float, bool]]:
        """camelCase record as handed to the report collaborator."""
        return {
            "sampleId": self.sample_id,
            "clusterLengthScale": self.cluster_length_scale,
            "flowBehaviorIndex": self.flow_behavior_index,
            "isNewtonian": self.is_newtonian,
        }

# ---------------------------------------------------------------------------
# 1. Power-law slope from the high-shear tail
# ---------------------------------------------------------------------------

def high_shear_tail(curve: Sequence[RheologyPoint]) -> Sequence[RheologyPoint]:
    """Return the last ``ceil(N/5)`` points of *curve*."""
    n = len(curve)
    tail = -(-n // HIGH_SHEAR_DIVISOR)
    if tail < 2:
        raise DegenerateCurveError(
            f"high-shear tail needs >= 2 points, curve of {n} gives {tail}; "
            f"use at least {HIGH_SHEAR_DIVISOR + 1} points"
        )
    return curve[n - tail:]


def flow_behavior_index(curve: Sequence[RheologyPoint]) -> float:
    """``1 + mean`` of the adjacent log-log slopes over the high-shear tail.

    * The slopes are averaged arithmetically, pair by pair. This is not a
      least-squares fit and differs from one on noisy data.
    * Raises :class:`DegenerateCurveError` if the tail is too short, not
      strictly increasing in shear rate, or holds non-finite or
      non-positive values.
    """
    tail = high_shear_tail(curve)
    gdot = np.array([p.shear_rate for p in tail], dtype=float)
    eta = np.array([p.viscosity for p in tail], dtype=float)

    for values in (gdot, eta):
        if np.any(~np.isfinite(values) | (values <= 0)):
            raise DegenerateCurveError(
                "high-shear tail holds non-finite or non-positive values"
            )
    d_log_gdot = np.diff(np.log10(gdot))
    if np.any(d_log_gdot <= 0):
        raise DegenerateCurveError(
            "shear rates must be strictly increasing in the high-shear tail"
        )

    slopes = np.diff(np.log10(eta)) / d_log_gdot
    return 1.0 + float(np.mean(slopes))

# ---------------------------------------------------------------------------
# 2. Toy cluster length scale
# ---------------------------------------------------------------------------

def cluster_length_scale(relaxation_time: float, flow_index: float) -> float:
    """Synthetic, non-negative; grows with λ and with shear thinning."""
    scale = (relaxation_time * CLUSTER_LAMBDA_WEIGHT
             + (1.0 - flow_index) * CLUSTER_THINNING_WEIGHT)
    if not np.isfinite(scale):
        raise DegenerateCurveError(
            f"cluster length scale is not finite (lambda={relaxation_time}, n={flow_index})"
        )
    return max(0.0, scale)

# ---------------------------------------------------------------------------
# 3. Per-sample analysis
# ---------------------------------------------------------------------------

def analyze_sample(
    params: ModelParams,
    curve: Union[FlowCurve, Sequence[RheologyPoint]],
) -> AnalysisResult:
    """Return the :class:`AnalysisResult` of *curve* for *params*."""
    if isinstance(curve, FlowCurve) and curve.params != params:
        raise DegenerateCurveError(
            f"curve was generated for {curve.params.sample_id!r}, "
            f"not for the given parameters of {params.sample_id!r}"
        )

    n_hat = flow_behavior_index(curve)
    result = AnalysisResult(
        sample_id=params.sample_id,
        flow_behavior_index=n_hat,
        cluster_length_scale=cluster_length_scale(params.relaxation_time, n_hat),
        is_newtonian=abs(n_hat - 1.0) < NEWTONIAN_TOLERANCE,
    )
    logger.debug(f"{params.sample_id}: n={n_hat:.4f}, "
                 f"L={result.cluster_length_scale:.3f}")
    return result
