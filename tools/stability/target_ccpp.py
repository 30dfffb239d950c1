"""
Tier 1 Tool: Target CCPP Solver

Finds the pH (holding calcium fixed) or the calcium level (holding pH fixed)
that gives a requested CCPP. All other parameters (TDS, temperature,
alkalinity) are held constant.

Typical use: set a stabilization target (e.g. CCPP = 4-10 mg/L) and read off
the caustic/lime pH setpoint or the calcium dose needed.
"""

from typing import Any, Dict
import logging

from core.calibration import get_calibration_profile
from core.schemas import TargetMode, WaterParameters
from core.target_solver import solve_for_target
from tools.stability.water_stability import build_provenance

logger = logging.getLogger(__name__)


def solve_target_ccpp(
    pH: float,
    temperature_C: float,
    tds_mg_L: float,
    calcium_mg_L_CaCO3: float,
    alkalinity_mg_L_CaCO3: float,
    target_ccpp_mg_L_CaCO3: float,
    mode: str = "pH",
    calibration_profile: str = "default",
) -> Dict[str, Any]:
    """
    Solve for the pH or calcium level that achieves a target CCPP.

    Args:
        pH: Measured pH (held fixed in calcium mode)
        temperature_C: Water temperature in degrees Celsius
        tds_mg_L: Total dissolved solids in mg/L
        calcium_mg_L_CaCO3: Calcium hardness in mg/L as CaCO₃ (held fixed in pH mode)
        alkalinity_mg_L_CaCO3: Total alkalinity in mg/L as CaCO₃
        target_ccpp_mg_L_CaCO3: Desired CCPP in mg/L as CaCO₃
        mode: "pH" or "calcium"
        calibration_profile: Name of a calibration profile

    Returns:
        Dictionary containing:
        - found: Whether the target is reachable within the search bracket
        - mode, target_ccpp_mg_L_CaCO3, search_bracket
        - required_pH or required_calcium_mg_L_CaCO3 (None when not found)
        - achieved_ccpp_mg_L_CaCO3: CCPP re-evaluated at the solution
        - message: Text summary
        - provenance

    Raises:
        ValueError: If inputs are invalid, the mode or the profile is unknown
    """
    try:
        target_mode = TargetMode(mode)
    except ValueError as e:
        raise ValueError(
            f"Unknown mode '{mode}'. Use one of: {', '.join(m.value for m in TargetMode)}"
        ) from e

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

    solution = solve_for_target(params, target_ccpp_mg_L_CaCO3, target_mode, calibration)

    value_key = "required_pH" if target_mode == TargetMode.PH else "required_calcium_mg_L_CaCO3"
    low, high = solution.bracket

    output: Dict[str, Any] = {
        "found": solution.found,
        "mode": target_mode.value,
        "target_ccpp_mg_L_CaCO3": target_ccpp_mg_L_CaCO3,
        "search_bracket": [low, high],
        value_key: None,
        "achieved_ccpp_mg_L_CaCO3": None,
    }

    if solution.found:
        digits = 3 if target_mode == TargetMode.PH else 1
        output[value_key] = round(solution.value, digits)
        output["achieved_ccpp_mg_L_CaCO3"] = round(solution.achieved_ccpp_mg_L_CaCO3, 2)
        output["message"] = (
            f"CCPP {target_ccpp_mg_L_CaCO3} mg/L reached at {target_mode.value} = "
            f"{output[value_key]}"
        )
    else:
        output["message"] = (
            f"Target CCPP {target_ccpp_mg_L_CaCO3} mg/L is not reachable by adjusting "
            f"{target_mode.value} within [{low}, {high}]"
        )

    output["provenance"] = build_provenance(params, calibration.name).model_dump(mode="json")
    return output
