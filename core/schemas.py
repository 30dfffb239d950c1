"""
Pydantic models for standardized request/response schemas.

The engine consumes one immutable WaterParameters record and produces one
immutable CalculationResult. Tool wrappers add provenance so downstream
agents can trace every number to its model and calibration profile.

Units convention:
    Calcium hardness and alkalinity are mg/L as CaCO₃ on input AND output.
"""

from typing import List, Optional, Tuple
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Confidence Levels
# ============================================================================

class ConfidenceLevel(str, Enum):
    """Confidence in prediction quality"""
    HIGH = "high"          # Within Davies validity (TDS ≤ 2000 mg/L), 0-60°C
    MEDIUM = "medium"      # Ionic strength beyond Davies validity
    LOW = "low"            # Extrapolated beyond calibration range
    UNKNOWN = "unknown"    # No validation data available


# ============================================================================
# Provenance Metadata
# ============================================================================

class ProvenanceMetadata(BaseModel):
    """
    Provenance tracking for all results.

    Enables AI agents to:
    - Assess result reliability
    - Trace predictions to source models and calibration profiles
    """
    model: str = Field(..., description="Model or tool identifier (e.g., 'carbonate_equilibrium_engine')")
    version: Optional[str] = Field(None, description="Model version")
    calibration_profile: Optional[str] = Field(None, description="Calibration profile name")
    confidence: ConfidenceLevel = Field(..., description="Confidence level in prediction")
    sources: List[str] = Field(default_factory=list, description="Literature citations")
    assumptions: List[str] = Field(default_factory=list, description="Key modeling assumptions")
    warnings: List[str] = Field(default_factory=list, description="Warnings or extrapolation notices")


# ============================================================================
# Engine Input
# ============================================================================

class WaterParameters(BaseModel):
    """Measured water quality parameters (immutable per call)."""
    model_config = ConfigDict(frozen=True)

    pH: float = Field(..., description="Measured pH", gt=0.0, lt=14.0)
    temperature_C: float = Field(..., description="Water temperature (°C)", ge=0.0, le=60.0)
    tds_mg_L: float = Field(..., description="Total dissolved solids (mg/L)", ge=0.0)
    calcium_mg_L_CaCO3: float = Field(..., description="Calcium hardness (mg/L as CaCO₃)", gt=0.0)
    alkalinity_mg_L_CaCO3: float = Field(..., description="Total alkalinity (mg/L as CaCO₃)", gt=0.0)


# ============================================================================
# Engine Output
# ============================================================================

class SaturationCondition(str, Enum):
    """CaCO₃ saturation state derived from the LSI"""
    UNDERSATURATED = "Undersaturated"
    SATURATED = "Saturated"
    OVERSATURATED = "Oversaturated"


class CalculationResult(BaseModel):
    """
    Calcium carbonate stability result.

    ccpp_mg_L_CaCO3 is signed: positive = CaCO₃ precipitates,
    negative = CaCO₃ dissolves before equilibrium is reached.
    """
    model_config = ConfigDict(frozen=True)

    lsi: float = Field(..., description="Langelier Saturation Index")
    ccpp_mg_L_CaCO3: float = Field(..., description="Calcium Carbonate Precipitation Potential (mg/L as CaCO₃)")
    saturation_pH: float = Field(..., description="pH at which current Ca/alkalinity is exactly saturated")
    saturation_condition: SaturationCondition
    equilibrium_pH: float = Field(..., description="pH after CCPP has precipitated/dissolved")
    equilibrium_alkalinity_mg_L_CaCO3: float = Field(..., description="Alkalinity at equilibrium (mg/L as CaCO₃)", ge=0.0)
    equilibrium_calcium_mg_L_CaCO3: float = Field(..., description="Calcium at equilibrium (mg/L as CaCO₃)", ge=0.0)


# ============================================================================
# Inverse Solver
# ============================================================================

class TargetMode(str, Enum):
    """Free variable adjusted by the target CCPP solver"""
    PH = "pH"
    CALCIUM = "calcium"


class TargetSolution(BaseModel):
    """
    Result of an inverse CCPP search.

    found=False (value=None) means the target lies outside what the search
    bracket can reach; callers must not treat it as a solved value.
    """
    mode: TargetMode
    target_ccpp_mg_L_CaCO3: float
    found: bool
    value: Optional[float] = Field(None, description="Required pH or calcium (mg/L as CaCO₃)")
    achieved_ccpp_mg_L_CaCO3: Optional[float] = Field(None, description="CCPP re-evaluated at the solution")
    bracket: Tuple[float, float] = Field(..., description="Search bracket for the free variable")


# ============================================================================
# Sensitivity Sweep
# ============================================================================

class SensitivityPoint(BaseModel):
    """One point of a CCPP/LSI sensitivity curve"""
    x: float = Field(..., description="Swept variable value (pH or mg/L as CaCO₃)")
    ccpp: float = Field(..., description="CCPP (mg/L as CaCO₃)")
    lsi: float = Field(..., description="Langelier Saturation Index")
