"""
Shared fixtures for the viscometry toolkit tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from viscometry_config import DEFAULT_SAMPLES, ModelParams


class ExtremeRng:
    """Stand-in generator that always draws the lowest (or highest) value."""

    def __init__(self, high: bool = False):
        self.high = high
        self.calls = 0

    def uniform(self, low, high, size):
        self.calls += 1
        return np.full(size, high if self.high else low, dtype=float)


class ExplodingRng:
    """Fails the test if any randomness is consumed."""

    def uniform(self, *args, **kwargs):
        raise AssertionError("noise was drawn although it is disabled")


@pytest.fixture
def buffer_sample() -> ModelParams:
    return DEFAULT_SAMPLES[0]


@pytest.fixture
def cluster_sample() -> ModelParams:
    return DEFAULT_SAMPLES[2]


@pytest.fixture
def power_law_sample() -> ModelParams:
    """Sample C without the η∞ plateau, so the tail is pure power law."""
    return DEFAULT_SAMPLES[2].with_updates(
        sample_id="power-law", infinite_shear_viscosity=0.0
    )


@pytest.fixture
def min_rng() -> ExtremeRng:
    return ExtremeRng(high=False)


@pytest.fixture
def max_rng() -> ExtremeRng:
    return ExtremeRng(high=True)


@pytest.fixture
def exploding_rng() -> ExplodingRng:
    return ExplodingRng()
