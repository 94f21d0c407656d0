# -*- coding: utf-8 -*-
"""
Central configuration for sample model parameters and curve settings,
plus the YAML sample loader.
"""
from dataclasses import dataclass, fields, replace
from pathlib import Path
import math
import yaml

# ──────────────────────────────────────────────────────────────────────────────
# Per-sample Carreau model parameters
# ──────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ModelParams:
    sample_id: str = "sample"
    name: str = "Sample"
    zero_shear_viscosity: float = 1.0      # η0 [cP]
    infinite_shear_viscosity: float = 1.0  # η∞ [cP], 0 ≤ η∞ ≤ η0
    relaxation_time: float = 0.0           # λ [s], cluster-size proxy
    power_index: float = 1.0               # n, shear-thinning exponent
    color: str = "#94a3b8"                 # plot colour only

    def with_updates(self, **changes) -> "ModelParams":
        """Return a copy with *changes* applied (e.g. an edited η0 or λ)."""
        return replace(self, **changes)


# Reference samples: buffer, dilute mAb, concentrated mAb with clusters
DEFAULT_SAMPLES: tuple[ModelParams, ...] = (
    ModelParams(
        sample_id="sample-a",
        name="Sample A (Buffer)",
        zero_shear_viscosity=1.2,
        infinite_shear_viscosity=1.0,
        relaxation_time=0.01,
        power_index=0.98,
        color="#94a3b8",
    ),
    ModelParams(
        sample_id="sample-b",
        name="Sample B (mAb 50mg/mL)",
        zero_shear_viscosity=8.5,
        infinite_shear_viscosity=4.0,
        relaxation_time=0.5,
        power_index=0.85,
        color="#3b82f6",
    ),
    ModelParams(
        sample_id="sample-c",
        name="Sample C (mAb 150mg/mL + Clusters)",
        zero_shear_viscosity=45.0,
        infinite_shear_viscosity=12.0,
        relaxation_time=2.5,
        power_index=0.6,
        color="#ef4444",
    ),
)

# ──────────────────────────────────────────────────────────────────────────────
# Curve generation settings
# ──────────────────────────────────────────────────────────────────────────────
@dataclass
class CurveSettings:
    point_count: int = 50           # shear rates per curve
    noise_amplitude: float = 0.02   # peak-to-peak fraction of η
    seed: int | None = None         # pin the noise for reproducible runs

# ──────────────────────────────────────────────────────────────────────────────
# Utility: load samples from a YAML file
# ──────────────────────────────────────────────────────────────────────────────
_NUMERIC_FIELDS = {
    "zero_shear_viscosity",
    "infinite_shear_viscosity",
    "relaxation_time",
    "power_index",
}

def check_sample(params: ModelParams) -> None:
    """Raise ValueError unless *params* lies in the model's input domain."""
    values = {key: getattr(params, key) for key in sorted(_NUMERIC_FIELDS)}
    bad = [key for key, v in values.items() if not math.isfinite(v)]
    if bad:
        raise ValueError(f"{params.sample_id}: non-finite {', '.join(bad)}")

    eta0 = params.zero_shear_viscosity
    eta_inf = params.infinite_shear_viscosity
    if eta0 <= 0:
        raise ValueError(f"{params.sample_id}: zero_shear_viscosity must be > 0, got {eta0}")
    if not 0 <= eta_inf <= eta0:
        raise ValueError(
            f"{params.sample_id}: infinite_shear_viscosity must lie in [0, {eta0}], got {eta_inf}"
        )
    if params.relaxation_time < 0:
        raise ValueError(
            f"{params.sample_id}: relaxation_time must be >= 0, got {params.relaxation_time}"
        )


def load_samples(path: Path) -> list[ModelParams]:
    """
    Load a list of ModelParams from a YAML file. Each entry should match the
    ModelParams fields; unknown keys are ignored. Values outside the
    model domain (see check_sample) and repeated sample_ids raise ValueError.

    Example YAML:
      - sample_id: sample-c
        name: mAb 150 mg/mL
        zero_shear_viscosity: 45.0
        infinite_shear_viscosity: 12.0
        relaxation_time: 2.5
        power_index: 0.6
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sample file not found: {path}")
    data = yaml.safe_load(path.read_text())
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of samples")

    known = {f.name for f in fields(ModelParams)}
    samples = []
    seen = set()
    for idx, entry in enumerate(data, 1):
        if not isinstance(entry, dict):
            raise ValueError(f"Sample entry {idx} in {path} must be a mapping.")
        params = {k: v for k, v in entry.items() if k in known}
        # PyYAML reads bare exponents such as 1e-2 as strings
        for key in _NUMERIC_FIELDS & params.keys():
            params[key] = float(params[key])
        if params.get("sample_id") is None:
            params["sample_id"] = f"sample_{idx}"
        params["sample_id"] = str(params["sample_id"])
        if params.get("name") is None:
            params["name"] = params["sample_id"]
        if params["sample_id"] in seen:
            raise ValueError(f"Duplicate sample_id {params['sample_id']!r} in {path}")
        seen.add(params["sample_id"])

        sample = ModelParams(**params)
        check_sample(sample)
        samples.append(sample)
    return samples
