"""
Tests for sample parameters, curve settings and the YAML loader.
"""

from dataclasses import FrozenInstanceError

import pytest

from viscometry_config import (
    DEFAULT_SAMPLES,
    CurveSettings,
    ModelParams,
    check_sample,
    load_samples,
)


class TestModelParams:
    """ModelParams is an immutable value edited by copy."""

    def test_reference_samples(self):
        """The three reference samples keep their documented values."""
        ids = [s.sample_id for s in DEFAULT_SAMPLES]
        assert ids == ["sample-a", "sample-b", "sample-c"]
        c = DEFAULT_SAMPLES[2]
        assert c.zero_shear_viscosity == 45.0
        assert c.infinite_shear_viscosity == 12.0
        assert c.relaxation_time == 2.5
        assert c.power_index == 0.6

    def test_frozen(self, cluster_sample):
        """Fields cannot be assigned in place."""
        with pytest.raises(FrozenInstanceError):
            cluster_sample.relaxation_time = 1.0

    def test_with_updates_returns_copy(self, cluster_sample):
        """Editing η0 yields a new value and leaves the original alone."""
        edited = cluster_sample.with_updates(zero_shear_viscosity=60.0)
        assert edited.zero_shear_viscosity == 60.0
        assert edited.sample_id == cluster_sample.sample_id
        assert cluster_sample.zero_shear_viscosity == 45.0
        assert edited != cluster_sample

    def test_curve_settings_defaults(self):
        settings = CurveSettings()
        assert settings.point_count == 50
        assert settings.noise_amplitude == 0.02
        assert settings.seed is None


class TestLoadSamples:
    """YAML sample files."""

    def test_loads_and_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "samples.yaml"
        path.write_text(
            "- sample_id: s1\n"
            "  name: First\n"
            "  zero_shear_viscosity: 10\n"
            "  infinite_shear_viscosity: 2\n"
            "  relaxation_time: 1e-2\n"
            "  power_index: 0.7\n"
            "  operator: someone\n"
        )
        samples = load_samples(path)
        assert len(samples) == 1
        s = samples[0]
        assert s.sample_id == "s1"
        assert s.name == "First"
        assert s.zero_shear_viscosity == 10.0
        assert s.relaxation_time == pytest.approx(0.01)
        assert isinstance(s.relaxation_time, float)

    def test_default_identifier(self, tmp_path):
        path = tmp_path / "samples.yaml"
        path.write_text("- power_index: 0.9\n- power_index: 0.8\n")
        samples = load_samples(path)
        assert [s.sample_id for s in samples] == ["sample_1", "sample_2"]
        assert samples[1].name == "sample_2"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_samples(tmp_path / "nope.yaml")

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "samples.yaml"
        path.write_text("sample_id: s1\n")
        with pytest.raises(ValueError, match="list of samples"):
            load_samples(path)

    def test_entry_not_a_mapping(self, tmp_path):
        path = tmp_path / "samples.yaml"
        path.write_text("- s1\n")
        with pytest.raises(ValueError, match="mapping"):
            load_samples(path)


class TestSampleDomain:
    """Loaded samples must lie in the model's input domain."""

    @pytest.mark.parametrize("body, message", [
        ("  zero_shear_viscosity: .nan\n", "non-finite"),
        ("  relaxation_time: .inf\n", "non-finite"),
        ("  zero_shear_viscosity: -50\n  infinite_shear_viscosity: 0\n",
         "zero_shear_viscosity"),
        ("  zero_shear_viscosity: 10\n  infinite_shear_viscosity: 80\n",
         "infinite_shear_viscosity"),
        ("  zero_shear_viscosity: 10\n  infinite_shear_viscosity: -1\n",
         "infinite_shear_viscosity"),
        ("  relaxation_time: -1\n", "relaxation_time"),
    ])
    def test_out_of_domain_rejected(self, tmp_path, body, message):
        path = tmp_path / "samples.yaml"
        path.write_text("- sample_id: bad\n" + body)
        with pytest.raises(ValueError, match=message):
            load_samples(path)

    def test_check_sample_accepts_reference_samples(self):
        for sample in DEFAULT_SAMPLES:
            check_sample(sample)

    def test_check_sample_boundaries(self):
        check_sample(ModelParams(zero_shear_viscosity=5.0,
                                 infinite_shear_viscosity=5.0,
                                 relaxation_time=0.0))
        check_sample(ModelParams(zero_shear_viscosity=5.0,
                                 infinite_shear_viscosity=0.0))


class TestSampleIdentifiers:
    """Identifiers are unique and never the literal string 'None'."""

    def test_duplicate_ids_rejected(self, tmp_path):
        path = tmp_path / "samples.yaml"
        path.write_text("- sample_id: x\n- sample_id: x\n")
        with pytest.raises(ValueError, match="Duplicate sample_id 'x'"):
            load_samples(path)

    def test_generated_id_colliding_with_explicit_id(self, tmp_path):
        path = tmp_path / "samples.yaml"
        path.write_text("- sample_id: sample_2\n- power_index: 0.9\n")
        with pytest.raises(ValueError, match="Duplicate sample_id"):
            load_samples(path)

    def test_null_id_and_name_use_defaults(self, tmp_path):
        path = tmp_path / "samples.yaml"
        path.write_text("- sample_id: null\n  name: null\n")
        sample = load_samples(path)[0]
        assert sample.sample_id == "sample_1"
        assert sample.name == "sample_1"
