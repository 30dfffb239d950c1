"""
Calcium carbonate stability engine for potable water.

This package provides:
- Calibration profiles (every numeric constant named and YAML-configurable)
- Equilibrium constants, Davies activity coefficients and carbonate speciation
- LSI, saturation pH and CCPP (nested fixed-iteration bisection)
- Inverse CCPP solving over pH or calcium
- Standardized pydantic schemas for inputs, results and provenance
"""

from .calibration import (
    CalibrationProfile,
    DEFAULT_CALIBRATION,
    get_calibration_profile,
    load_calibration_profiles,
)
from .equilibrium import (
    EquilibriumConstants,
    SpeciationFractions,
    equilibrium_constants,
    speciation_fractions,
    solve_equilibrium_ph,
)
from .schemas import (
    CalculationResult,
    ConfidenceLevel,
    ProvenanceMetadata,
    SaturationCondition,
    SensitivityPoint,
    TargetMode,
    TargetSolution,
    WaterParameters,
)
from .stability_engine import evaluate
from .target_solver import solve_for_target

__all__ = [
    "CalibrationProfile",
    "DEFAULT_CALIBRATION",
    "get_calibration_profile",
    "load_calibration_profiles",
    "EquilibriumConstants",
    "SpeciationFractions",
    "equilibrium_constants",
    "speciation_fractions",
    "solve_equilibrium_ph",
    "CalculationResult",
    "ConfidenceLevel",
    "ProvenanceMetadata",
    "SaturationCondition",
    "SensitivityPoint",
    "TargetMode",
    "TargetSolution",
    "WaterParameters",
    "evaluate",
    "solve_for_target",
]
