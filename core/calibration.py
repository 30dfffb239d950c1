"""
Calibration constants for the calcium carbonate stability engine.

Historical variants of the LSI/CCPP calculation disagree on the ionic-strength
coefficient, the Ks offset, the CaCO₃ molar mass and the classification band.
All of them are gathered in one frozen pydantic model so the engine stays a
pure function of (WaterParameters, CalibrationProfile).

Profiles are declared in databases/calibration_profiles.yaml:
- PRIMARY: YAML lookup (lazy, cached per path)
- Keys omitted from a profile fall back to the model defaults

Usage:
    >>> profile = get_calibration_profile("low_ionic_strength")
    >>> profile.ionic_strength_per_tds
    1.9e-05
"""

from typing import Dict, Optional, Tuple
from pathlib import Path
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


DEFAULT_PROFILE_NAME = "default"


class CalibrationProfile(BaseModel):
    """Named numeric constants used by every stage of the engine."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default=DEFAULT_PROFILE_NAME, description="Profile identifier")
    description: str = Field(default="", description="Human-readable summary")

    # Activity model
    ionic_strength_per_tds: float = Field(
        default=2.5e-5,
        description="Ionic strength (mol/L) per mg/L TDS",
        gt=0.0,
    )
    davies_a0: float = Field(default=0.4918, description="Debye-Hückel A(T) constant term")
    davies_a1: float = Field(default=6.614e-4, description="A(T) linear term (per °C)")
    davies_a2: float = Field(default=4.975e-6, description="A(T) quadratic term (per °C²)")
    davies_linear_coefficient: float = Field(
        default=0.3,
        description="Davies equation linear ionic-strength coefficient",
        ge=0.0,
    )

    # Thermodynamics
    log_ks_offset: float = Field(
        default=0.0,
        description="Offset added to log10(Ks) to match a reference benchmark",
    )

    # Units
    caco3_molar_mass_g_mol: float = Field(
        default=100.09,
        description="CaCO₃ molar mass (g/mol); alkalinity equivalent weight is half",
        gt=0.0,
    )

    # Classification
    saturation_threshold: float = Field(
        default=0.05,
        description="Symmetric LSI band classified as Saturated",
        ge=0.0,
    )

    # Solvers
    ph_solver_bracket: Tuple[float, float] = Field(default=(4.0, 13.0))
    ph_solver_iterations: int = Field(default=40, gt=0)
    saturation_ph_bracket: Tuple[float, float] = Field(default=(5.0, 12.0))
    saturation_ph_iterations: int = Field(default=40, gt=0)
    ccpp_bracket_mol_L: float = Field(
        default=0.01,
        description="Half-width of the CaCO₃ transfer bracket (mol/L)",
        gt=0.0,
    )
    ccpp_iterations: int = Field(default=50, gt=0)
    concentration_floor_mol_L: float = Field(default=1e-12, gt=0.0)
    target_ph_bracket: Tuple[float, float] = Field(default=(6.0, 10.0))
    target_calcium_bracket_mg_L: Tuple[float, float] = Field(default=(1.0, 500.0))
    target_iterations: int = Field(default=40, gt=0)

    @field_validator(
        "ph_solver_bracket",
        "saturation_ph_bracket",
        "target_ph_bracket",
        "target_calcium_bracket_mg_L",
    )
    @classmethod
    def bracket_is_ordered(cls, v):
        if v[0] >= v[1]:
            raise ValueError(f"bracket lower bound must be below upper bound, got {v}")
        return v

    @model_validator(mode="after")
    def calcium_bracket_positive(self):
        if self.target_calcium_bracket_mg_L[0] <= 0:
            raise ValueError("target_calcium_bracket_mg_L must start above 0 mg/L")
        return self

    @property
    def alkalinity_equivalent_weight_g_eq(self) -> float:
        """Equivalent weight of alkalinity expressed as CaCO₃ (g/eq)."""
        return self.caco3_molar_mass_g_mol / 2.0


DEFAULT_CALIBRATION = CalibrationProfile(
    description="Langelier TDS ionic-strength estimate (2.5e-5 x TDS), +/-0.05 LSI band",
)


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------

_profile_cache: Dict[str, Dict[str, CalibrationProfile]] = {}


def _default_yaml_path() -> Path:
    """Get default YAML path relative to this module"""
    return Path(__file__).parent.parent / "databases" / "calibration_profiles.yaml"


def load_calibration_profiles(yaml_path: Optional[str] = None) -> Dict[str, CalibrationProfile]:
    """
    Load every calibration profile declared in a YAML file.

    Args:
        yaml_path: Path to a profiles YAML file (default: databases/calibration_profiles.yaml)

    Returns:
        Dictionary {profile_name: CalibrationProfile}

    Raises:
        FileNotFoundError: If the YAML file does not exist
        ValueError: If the file has no 'profiles' mapping
        pydantic.ValidationError: If a profile holds an invalid constant
    """
    path = Path(yaml_path) if yaml_path else _default_yaml_path()
    cache_key = str(path.resolve())
    if cache_key in _profile_cache:
        return _profile_cache[cache_key]

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    raw_profiles = data.get("profiles")
    if not isinstance(raw_profiles, dict) or not raw_profiles:
        raise ValueError(f"No 'profiles' mapping found in {path}")

    profiles = {
        name: CalibrationProfile(name=name, **(values or {}))
        for name, values in raw_profiles.items()
    }

    logger.info(f"Loaded {len(profiles)} calibration profiles from {path}")
    _profile_cache[cache_key] = profiles
    return profiles


def get_calibration_profile(
    name: str = DEFAULT_PROFILE_NAME,
    yaml_path: Optional[str] = None,
) -> CalibrationProfile:
    """
    Look up a calibration profile by name.

    Raises:
        KeyError: If the profile is not declared
    """
    profiles = load_calibration_profiles(yaml_path)
    if name not in profiles:
        raise KeyError(
            f"Unknown calibration profile '{name}'. "
            f"Available: {', '.join(sorted(profiles))}"
        )
    return profiles[name]
