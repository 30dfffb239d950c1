"""
Tests for calibration profiles (core/calibration.py)

Validates:
- Shipped YAML profiles load and fall back to model defaults
- Unknown profiles and malformed constants fail fast
- Profiles are immutable
"""

import pytest
from pathlib import Path
import sys

from pydantic import ValidationError

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.calibration import (
    CalibrationProfile,
    DEFAULT_CALIBRATION,
    get_calibration_profile,
    load_calibration_profiles,
)


class TestShippedProfiles:
    """Profiles declared in databases/calibration_profiles.yaml"""

    def test_expected_profiles_present(self):
        profiles = load_calibration_profiles()
        assert {"default", "low_ionic_strength", "wide_threshold"} <= set(profiles)

    def test_default_profile_matches_model_defaults(self):
        """The YAML default profile carries the same constants as DEFAULT_CALIBRATION"""
        profile = get_calibration_profile("default")
        skip = {"name", "description"}
        assert profile.model_dump(exclude=skip) == DEFAULT_CALIBRATION.model_dump(exclude=skip)

    def test_partial_profile_falls_back_to_defaults(self):
        profile = get_calibration_profile("low_ionic_strength")
        assert profile.ionic_strength_per_tds == pytest.approx(1.9e-5)
        assert profile.caco3_molar_mass_g_mol == DEFAULT_CALIBRATION.caco3_molar_mass_g_mol
        assert profile.ph_solver_bracket == DEFAULT_CALIBRATION.ph_solver_bracket

    def test_profile_name_assigned(self):
        assert get_calibration_profile("wide_threshold").name == "wide_threshold"

    def test_unknown_profile(self):
        with pytest.raises(KeyError, match="Unknown calibration profile"):
            get_calibration_profile("does_not_exist")


class TestCalibrationProfileModel:
    """Validation rules on CalibrationProfile"""

    def test_alkalinity_equivalent_weight(self):
        assert DEFAULT_CALIBRATION.alkalinity_equivalent_weight_g_eq == pytest.approx(50.045)

    def test_profile_is_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_CALIBRATION.saturation_threshold = 0.5

    def test_unordered_bracket_rejected(self):
        with pytest.raises(ValidationError, match="lower bound"):
            CalibrationProfile(ph_solver_bracket=(13.0, 4.0))

    def test_calcium_bracket_must_start_above_zero(self):
        with pytest.raises(ValidationError, match="above 0"):
            CalibrationProfile(target_calcium_bracket_mg_L=(0.0, 500.0))

    def test_unknown_constant_rejected(self):
        with pytest.raises(ValidationError):
            CalibrationProfile(not_a_constant=1.0)

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError):
            CalibrationProfile(saturation_threshold=-0.05)


class TestCustomYaml:
    """Loading profiles from a caller-supplied YAML file"""

    def test_load_custom_file(self, tmp_path):
        yaml_file = tmp_path / "profiles.yaml"
        yaml_file.write_text(
            "profiles:\n"
            "  lab_reference:\n"
            "    description: Offset to match lab marble test\n"
            "    log_ks_offset: -0.05\n"
            "    saturation_threshold: 0.1\n"
        )

        profile = get_calibration_profile("lab_reference", yaml_path=str(yaml_file))
        assert profile.log_ks_offset == pytest.approx(-0.05)
        assert profile.saturation_threshold == pytest.approx(0.1)

    def test_missing_profiles_section(self, tmp_path):
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("metadata:\n  version: '1'\n")

        with pytest.raises(ValueError, match="No 'profiles' mapping"):
            load_calibration_profiles(str(yaml_file))

    def test_invalid_constant_in_yaml(self, tmp_path):
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text(
            "profiles:\n"
            "  broken:\n"
            "    ionic_strength_per_tds: -1.0\n"
        )

        with pytest.raises(ValidationError):
            load_calibration_profiles(str(yaml_file))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_calibration_profiles(str(tmp_path / "missing.yaml"))
