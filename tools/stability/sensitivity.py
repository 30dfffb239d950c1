"""
Tier 1 Tool: CCPP/LSI Sensitivity Sweep

Evaluates the stability engine over a grid of pH or calcium values with all
other parameters held fixed. Each point is independent, so sweeps of a few
hundred points are cheap and need no shared state.

Default grids:
- pH: 7.0 to 9.0 in 0.05 steps
- calcium: current value ±150 mg/L as CaCO₃ in 5 mg/L steps (kept above 0)
"""

from typing import Any, Dict, List, Optional
import logging

import numpy as np

from core.calibration import CalibrationProfile, get_calibration_profile
from core.schemas import SensitivityPoint, WaterParameters
from core.stability_engine import evaluate
from tools.stability.water_stability import davies_range_warning

logger = logging.getLogger(__name__)


SWEEP_VARIABLES = {
    "pH": "pH",
    "calcium": "calcium_mg_L_CaCO3",
}

DEFAULT_PH_RANGE = (7.0, 9.0, 0.05)
DEFAULT_CALCIUM_HALF_SPAN = 150.0
DEFAULT_CALCIUM_STEP = 5.0

# Guard against accidental million-point sweeps
MAX_SWEEP_POINTS = 2000


def sweep_grid(
    params: WaterParameters,
    variable: str,
    start: Optional[float] = None,
    stop: Optional[float] = None,
    step: Optional[float] = None,
) -> np.ndarray:
    """
    Build the grid of values for a sweep (inclusive of stop).

    Raises:
        ValueError: For unknown variables, non-positive steps or oversize grids
    """
    if variable not in SWEEP_VARIABLES:
        raise ValueError(f"Unknown sweep variable '{variable}'. Use one of: {', '.join(SWEEP_VARIABLES)}")

    if variable == "pH":
        d_start, d_stop, d_step = DEFAULT_PH_RANGE
    else:
        d_step = DEFAULT_CALCIUM_STEP
        d_start = max(d_step, params.calcium_mg_L_CaCO3 - DEFAULT_CALCIUM_HALF_SPAN)
        d_stop = params.calcium_mg_L_CaCO3 + DEFAULT_CALCIUM_HALF_SPAN

    start = d_start if start is None else start
    stop = d_stop if stop is None else stop
    step = d_step if step is None else step

    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if stop < start:
        raise ValueError(f"stop ({stop}) must not be below start ({start})")

    n_points = int(np.floor((stop - start) / step + 1e-9)) + 1
    if n_points > MAX_SWEEP_POINTS:
        raise ValueError(f"Sweep of {n_points} points exceeds limit of {MAX_SWEEP_POINTS}")

    return start + step * np.arange(n_points)


def run_sensitivity_sweep(
    params: WaterParameters,
    variable: str = "pH",
    start: Optional[float] = None,
    stop: Optional[float] = None,
    step: Optional[float] = None,
    calibration: Optional[CalibrationProfile] = None,
) -> List[SensitivityPoint]:
    """
    Evaluate CCPP and LSI at every grid value of the swept variable.

    Returns:
        List of SensitivityPoint ordered by x
    """
    field = SWEEP_VARIABLES.get(variable)
    grid = sweep_grid(params, variable, start, stop, step)

    base = params.model_dump()
    points = []
    for x in grid:
        x = round(float(x), 6)
        trial = WaterParameters(**{**base, field: x})
        result = evaluate(trial, calibration)
        points.append(SensitivityPoint(x=x, ccpp=result.ccpp_mg_L_CaCO3, lsi=result.lsi))

    logger.debug(f"Sensitivity sweep over {variable}: {len(points)} points")
    return points


def sensitivity_sweep(
    pH: float,
    temperature_C: float,
    tds_mg_L: float,
    calcium_mg_L_CaCO3: float,
    alkalinity_mg_L_CaCO3: float,
    variable: str = "pH",
    start: Optional[float] = None,
    stop: Optional[float] = None,
    step: Optional[float] = None,
    calibration_profile: str = "default",
) -> Dict[str, Any]:
    """
    CCPP/LSI curves versus pH or calcium for charting.

    Args:
        pH, temperature_C, tds_mg_L, calcium_mg_L_CaCO3, alkalinity_mg_L_CaCO3:
            Base water (the swept variable's base value marks the operating point)
        variable: "pH" or "calcium"
        start, stop, step: Grid definition (defaults per module docstring)
        calibration_profile: Name of a calibration profile

    Returns:
        Dictionary containing:
        - variable: Swept variable
        - operating_point: Base value of the swept variable
        - points: [{"x", "ccpp", "lsi"}] rounded to 2 decimals
        - zero_crossing: Interpolated x where CCPP crosses 0 (None if no crossing)
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

    tds_warning = davies_range_warning(params)
    if tds_warning:
        logger.warning(tds_warning)

    points = run_sensitivity_sweep(params, variable, start, stop, step, calibration)

    xs = np.array([p.x for p in points])
    ccpps = np.array([p.ccpp for p in points])

    zero_crossing = None
    sign_change = np.nonzero(np.diff(np.sign(ccpps)))[0]
    if sign_change.size > 0:
        i = int(sign_change[0])
        zero_crossing = round(float(np.interp(0.0, ccpps[i:i + 2], xs[i:i + 2])), 3)

    return {
        "variable": variable,
        "operating_point": getattr(params, SWEEP_VARIABLES[variable]),
        "points": [
            {"x": p.x, "ccpp": round(p.ccpp, 2), "lsi": round(p.lsi, 2)}
            for p in points
        ],
        "zero_crossing": zero_crossing,
    }
