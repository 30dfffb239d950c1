"""
Tier 1 Tool: Calcium Carbonate Stability (LSI + CCPP)

Runs the carbonate equilibrium engine on five measured parameters and
returns LSI, saturation pH, CCPP and the equilibrium state, with an
engineering interpretation.

Interpretation:
- LSI > 0 / CCPP > 0: Scaling tendency (water can precipitate CaCO₃)
- LSI = 0 / CCPP = 0: Equilibrium
- LSI < 0 / CCPP < 0: Corrosive tendency (water can dissolve CaCO₃)

Common in potable water distribution (Pb/Cu corrosion control), softening
and remineralization plants.

Performance: ~10 ms
"""

from typing import Any, Dict, List, Optional
import logging

from core.calibration import get_calibration_profile
from core.equilibrium import DAVIES_TDS_LIMIT_MG_L
from core.schemas import (
    CalculationResult,
    ConfidenceLevel,
    ProvenanceMetadata,
    WaterParameters,
)
from core.stability_engine import evaluate

logger = logging.getLogger(__name__)


ENGINE_MODEL_NAME = "carbonate_equilibrium_engine"
ENGINE_VERSION = "0.1.0"

ENGINE_SOURCES = [
    "Plummer & Busenberg (1982) Geochim. Cosmochim. Acta 46:1011-1040 (calcite Ks)",
    "Harned & Davis (1943); Harned & Scholes (1941) (carbonic acid K1, K2)",
    "Davies (1962) Ion Association (activity coefficients)",
    "Standard Methods 2330 (calcium carbonate saturation)",
]

ENGINE_ASSUMPTIONS = [
    "Closed system during precipitation/dissolution (no CO2 exchange)",
    "Ionic strength estimated linearly from TDS",
    "Only Ca/carbonate/hydroxide system modeled; no ion pairing",
    "Calcium and alkalinity expressed as mg/L CaCO3",
]


def interpret_lsi(lsi: float) -> Dict[str, str]:
    """LSI severity band with recommended action."""
    if lsi > 2.0:
        interpretation = "Severe scaling tendency"
        action = "Immediate action required: Lower pH or soften. Heavy scale formation expected."
    elif lsi > 0.5:
        interpretation = "Moderate scaling tendency"
        action = "Action recommended: Consider pH reduction or scale inhibitor. Scale formation likely."
    elif lsi > 0.0:
        interpretation = "Mild scaling tendency"
        action = "Monitor closely. Thin protective scale may form."
    elif lsi > -0.5:
        interpretation = "Near equilibrium (balanced)"
        action = "No action required. Water is well-balanced."
    elif lsi > -2.0:
        interpretation = "Corrosive tendency"
        action = "Consider pH/alkalinity adjustment or corrosion inhibitor. May dissolve existing scale."
    else:
        interpretation = "Severely corrosive"
        action = "Immediate action required: Raise pH, alkalinity and calcium. Aggressive water."
    return {"interpretation": interpretation, "action_required": action}


def interpret_ccpp(ccpp_mg_L: float) -> str:
    """
    CCPP band description.

    Bands follow common potable water practice: a small positive CCPP
    (4-10 mg/L) lays down a protective layer, larger values scale.
    """
    if ccpp_mg_L < 0.0:
        return f"Aggressive: water can dissolve {abs(ccpp_mg_L):.1f} mg/L CaCO3"
    if ccpp_mg_L < 4.0:
        return "Marginal: too little precipitation potential for a protective layer"
    if ccpp_mg_L <= 10.0:
        return "Protective: thin CaCO3 layer expected"
    if ccpp_mg_L <= 15.0:
        return "Moderate scaling: CaCO3 deposition likely"
    return "Excessive scaling: heavy CaCO3 deposition expected"


def davies_range_warning(params: WaterParameters) -> Optional[str]:
    """Warning text when TDS is beyond the Davies equation's validity, else None."""
    if params.tds_mg_L <= DAVIES_TDS_LIMIT_MG_L:
        return None
    return (
        f"TDS {params.tds_mg_L:.0f} mg/L exceeds Davies validity "
        f"(~{DAVIES_TDS_LIMIT_MG_L:.0f} mg/L); activity coefficients are approximate"
    )


def build_provenance(params: WaterParameters, profile_name: str) -> ProvenanceMetadata:
    """
    Provenance block shared by all stability tools.

    Called once per tool invocation, so range warnings are logged here
    rather than on every engine evaluation.
    """
    warnings: List[str] = []
    confidence = ConfidenceLevel.HIGH

    tds_warning = davies_range_warning(params)
    if tds_warning:
        logger.warning(tds_warning)
        warnings.append(tds_warning)
        confidence = ConfidenceLevel.MEDIUM

    return ProvenanceMetadata(
        model=ENGINE_MODEL_NAME,
        version=ENGINE_VERSION,
        calibration_profile=profile_name,
        confidence=confidence,
        sources=list(ENGINE_SOURCES),
        assumptions=list(ENGINE_ASSUMPTIONS),
        warnings=warnings,
    )


def format_result(result: CalculationResult) -> Dict[str, Any]:
    """Round engine output for display."""
    return {
        "lsi": round(result.lsi, 3),
        "ccpp_mg_L_CaCO3": round(result.ccpp_mg_L_CaCO3, 2),
        "pH_saturation": round(result.saturation_pH, 3),
        "saturation_condition": result.saturation_condition.value,
        "equilibrium_pH": round(result.equilibrium_pH, 3),
        "equilibrium_alkalinity_mg_L_CaCO3": round(result.equilibrium_alkalinity_mg_L_CaCO3, 2),
        "equilibrium_calcium_mg_L_CaCO3": round(result.equilibrium_calcium_mg_L_CaCO3, 2),
    }


def calculate_water_stability(
    pH: float,
    temperature_C: float,
    tds_mg_L: float,
    calcium_mg_L_CaCO3: float,
    alkalinity_mg_L_CaCO3: float,
    calibration_profile: str = "default",
) -> Dict[str, Any]:
    """
    Calculate LSI, CCPP and equilibrium state for a potable water.

    Args:
        pH: Measured pH
        temperature_C: Water temperature in degrees Celsius (0-60)
        tds_mg_L: Total dissolved solids in mg/L
        calcium_mg_L_CaCO3: Calcium hardness in mg/L as CaCO₃
        alkalinity_mg_L_CaCO3: Total alkalinity in mg/L as CaCO₃
        calibration_profile: Name of a profile in databases/calibration_profiles.yaml

    Returns:
        Dictionary containing:
        - lsi, ccpp_mg_L_CaCO3, pH_saturation, saturation_condition
        - equilibrium_pH, equilibrium_alkalinity_mg_L_CaCO3, equilibrium_calcium_mg_L_CaCO3
        - inputs: Echo of the validated inputs
        - interpretation / action_required: LSI-based summary
        - ccpp_interpretation: CCPP-based summary
        - note: Optional context (elevated temperature, high TDS)
        - provenance: Model, calibration profile, sources, warnings

    Example:
        >>> result = calculate_water_stability(
        ...     pH=7.8, temperature_C=20.0, tds_mg_L=200.0,
        ...     calcium_mg_L_CaCO3=150.0, alkalinity_mg_L_CaCO3=120.0,
        ... )
        >>> result["saturation_condition"]
        'Oversaturated'

    Raises:
        ValueError: If inputs are outside their physical domain, pH is
                    inconsistent with alkalinity, or the profile is unknown
    """
    params = WaterParameters(
        pH=pH,
        temperature_C=temperature_C,
        tds_mg_L=tds_mg_L,
        calcium_mg_L_CaCO3=calcium_mg_L_CaCO3,
        alkalinity_mg_L_CaCO3=alkalinity_mg_L_CaCO3,
    )

    try:
        calibration = get_calibration_profile(calibration_profile)
    except KeyError as e:
        raise ValueError(str(e)) from e

    result = evaluate(params, calibration)

    output = format_result(result)
    output["inputs"] = params.model_dump()
    output.update(interpret_lsi(result.lsi))
    output["ccpp_interpretation"] = interpret_ccpp(result.ccpp_mg_L_CaCO3)

    if temperature_C > 30.0:
        output["note"] = (
            "Elevated temperature lowers CaCO3 solubility. "
            "Check hot-water systems and heat exchanger surfaces."
        )
    elif tds_mg_L > DAVIES_TDS_LIMIT_MG_L:
        output["note"] = (
            "High TDS: ionic strength is outside the Davies range. "
            "Confirm with a full speciation model."
        )

    output["provenance"] = build_provenance(params, calibration.name).model_dump(mode="json")

    logger.info(
        f"Water stability: LSI={output['lsi']}, CCPP={output['ccpp_mg_L_CaCO3']} mg/L "
        f"({output['saturation_condition']})"
    )
    return output
