#!/usr/bin/env python3
"""
flow_curve.py
---------------------------------------------------------------
• Library functions:
      carreau(gdot, eta0, eta_inf, lam, n)       → model η (cP)
      shear_rate_grid(points)                    → log-spaced γ̇ (1/s)
      generate_flow_curve(params, points, rng=…) → FlowCurve

• Stand-alone CLI:
      $ python flow_curve.py --sample sample-c --seed 7
  writes the synthetic curve of one reference sample to CSV.
"""

# ───────────────────────── imports ──────────────────────────
from __future__ import annotations

from dataclasses import dataclass
import argparse
import logging
import numpy as np
import pandas as pd

from viscometry_config import DEFAULT_SAMPLES, ModelParams

logger = logging.getLogger(__name__)

# ───────────────────────── constants ───────────────────────
MIN_SHEAR_RATE  = 0.1     # s⁻¹
MAX_SHEAR_RATE  = 1000.0  # s⁻¹
MIN_VISCOSITY   = 0.1     # floor so log10(η) stays finite downstream
NOISE_AMPLITUDE = 0.02    # 2 % peak-to-peak
STRESS_SCALE    = 1000.0  # τ = γ̇·η / STRESS_SCALE  (calibration, not physics)


class DegenerateCurveError(ValueError):
    """A curve too short or malformed to generate or analyse."""


# ───────────────────────── data types ──────────────────────
@dataclass(frozen=True)
class RheologyPoint:
    shear_rate: float    # γ̇ [1/s]
    viscosity: float     # η [cP]
    shear_stress: float  # τ [Pa], scaled by STRESS_SCALE


@dataclass(frozen=True)
class FlowCurve:
    """Points generated for *params*; the pair travels together to analysis."""
    params: ModelParams
    points: tuple[RheologyPoint, ...]

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, idx):
        return self.points[idx]

    @property
    def shear_rates(self) -> np.ndarray:
        return np.array([p.shear_rate for p in self.points], dtype=float)

    @property
    def viscosities(self) -> np.ndarray:
        return np.array([p.viscosity for p in self.points], dtype=float)

    @property
    def shear_stresses(self) -> np.ndarray:
        return np.array([p.shear_stress for p in self.points], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "shear_rate": self.shear_rates,
            "viscosity": self.viscosities,
            "shear_stress": self.shear_stresses,
        })


# ───────────────────── helper functions ────────────────────
def carreau(g, eta0, eta_inf, lam, n):
    """Carreau viscosity; η0 as γ̇→0 and η∞ as γ̇→∞ for n < 1."""
    g = np.asarray(g, dtype=float)
    base = 1.0 + (lam * g)**2
    return eta_inf + (eta0 - eta_inf) * base**((n - 1.0) / 2.0)


def shear_rate_grid(points: int = 50) -> np.ndarray:
    """Log-spaced shear rates from MIN_SHEAR_RATE to MAX_SHEAR_RATE inclusive."""
    if points < 2:
        raise DegenerateCurveError(
            f"point_count must be >= 2 to space shear rates, got {points}"
        )
    lo, hi = np.log10(MIN_SHEAR_RATE), np.log10(MAX_SHEAR_RATE)
    frac = np.arange(points, dtype=float) / (points - 1)
    return 10.0**(lo + frac * (hi - lo))


# ───────────────────── public API ───────────────────────────
def generate_flow_curve(
    params: ModelParams,
    point_count: int = 50,
    *,
    rng: np.random.Generator | None = None,
    noise_amplitude: float = NOISE_AMPLITUDE,
) -> FlowCurve:
    """
    Synthetic flow curve for one sample.

    Noise is ``u · η · noise_amplitude`` with ``u ~ U[-0.5, 0.5)`` drawn from
    *rng*; pass a seeded generator to pin it, or ``noise_amplitude=0`` to
    switch it off. Model parameters are taken as given.
    """
    gdot = shear_rate_grid(point_count)
    eta = carreau(gdot,
                  params.zero_shear_viscosity,
                  params.infinite_shear_viscosity,
                  params.relaxation_time,
                  params.power_index)

    if noise_amplitude:
        if rng is None:
            rng = np.random.default_rng()
        u = rng.uniform(-0.5, 0.5, size=point_count)
        eta = eta + u * (eta * noise_amplitude)

    clamped = int(np.count_nonzero(eta < MIN_VISCOSITY))
    if clamped:
        logger.warning(
            f"{params.sample_id}: {clamped} viscosities clamped to {MIN_VISCOSITY}"
        )
    eta = np.maximum(eta, MIN_VISCOSITY)
    tau = gdot * eta / STRESS_SCALE

    logger.debug(
        f"{params.sample_id}: {point_count} points, "
        f"η {eta[0]:.4g} → {eta[-1]:.4g}"
    )
    points = tuple(
        RheologyPoint(float(g), float(e), float(t))
        for g, e, t in zip(gdot, eta, tau)
    )
    return FlowCurve(params=params, points=points)


# ───────────── CLI: write one reference curve ──────────────
def _cli():
    ap = argparse.ArgumentParser()
    ap.add_argument("--sample", default=DEFAULT_SAMPLES[-1].sample_id,
                    choices=[s.sample_id for s in DEFAULT_SAMPLES],
                    help="Reference sample to generate")
    ap.add_argument("--points", type=int, default=50,
                    help="Number of shear rates")
    ap.add_argument("--seed", type=int, default=None,
                    help="Seed for the noise generator")
    args = ap.parse_args()

    params = next(s for s in DEFAULT_SAMPLES if s.sample_id == args.sample)
    curve = generate_flow_curve(params, args.points,
                                rng=np.random.default_rng(args.seed))

    csv_name = f"flow_curve_{params.sample_id}.csv"
    curve.to_frame().to_csv(csv_name, index=False)
    print(f"[OK] {csv_name} written ({len(curve)} points)")

# ────────────────────────────────────────────────────────────
if __name__ == "__main__":  # only runs when executed directly
    _cli()
