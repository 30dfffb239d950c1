"""
Inverse CCPP solver.

Finds the pH (at fixed calcium) or the calcium level (at fixed pH) that gives
a requested CCPP, by an outer bisection that re-runs the full stability
engine at every trial. CCPP increases monotonically with both pH and calcium
over the practical domain, so the bisection direction is the same as in the
inner solvers.

The CCPP at both bracket ends is evaluated first: a target outside that range
is reported as not found instead of silently returning a bracket boundary.

pH mode:
    At fixed alkalinity, a high enough pH puts more hydroxide in solution
    than the alkalinity can carry (CT ≤ 0). The pH bracket is capped at the
    highest pH where the water can still exist before any trial is evaluated.
"""

from typing import Optional, Tuple
import logging

from core.calibration import CalibrationProfile, DEFAULT_CALIBRATION
from core.equilibrium import equilibrium_constants
from core.schemas import TargetMode, TargetSolution, WaterParameters
from core.stability_engine import evaluate, total_inorganic_carbon
from utils.unit_conversion import alkalinity_mg_L_CaCO3_to_eq_L

logger = logging.getLogger(__name__)


_FIELD_BY_MODE = {
    TargetMode.PH: "pH",
    TargetMode.CALCIUM: "calcium_mg_L_CaCO3",
}


def _bracket_for(mode: TargetMode, calibration: CalibrationProfile) -> Tuple[float, float]:
    if mode == TargetMode.PH:
        return calibration.target_ph_bracket
    return calibration.target_calcium_bracket_mg_L


def _ccpp_at(
    params: WaterParameters,
    mode: TargetMode,
    value: float,
    calibration: CalibrationProfile,
) -> float:
    trial = WaterParameters(**{**params.model_dump(), _FIELD_BY_MODE[mode]: value})
    return evaluate(trial, calibration).ccpp_mg_L_CaCO3


def highest_consistent_ph(
    params: WaterParameters,
    low_ph: float,
    high_ph: float,
    calibration: Optional[CalibrationProfile] = None,
) -> Optional[float]:
    """
    Highest pH in [low_ph, high_ph] at which the stated alkalinity can exist.

    CT = (Alk − [OH⁻] + [H⁺]) / (α₁ + 2α₂) changes sign only once, from
    positive to negative, as pH rises, so the consistent pH values form one
    interval starting at low_ph.

    Returns:
        high_ph if the whole bracket is consistent, None if low_ph already
        is not, otherwise the last consistent bisection bound
    """
    calibration = calibration or DEFAULT_CALIBRATION
    constants = equilibrium_constants(params.temperature_C, params.tds_mg_L, calibration)
    alk_eq = alkalinity_mg_L_CaCO3_to_eq_L(
        params.alkalinity_mg_L_CaCO3, calibration.caco3_molar_mass_g_mol
    )

    def consistent(pH: float) -> bool:
        return total_inorganic_carbon(alk_eq, pH, constants) > 0

    if consistent(high_ph):
        return high_ph
    if not consistent(low_ph):
        return None

    lo, hi = low_ph, high_ph
    for _ in range(calibration.target_iterations):
        mid = (lo + hi) / 2.0
        if consistent(mid):
            lo = mid
        else:
            hi = mid

    return lo


def solve_for_target(
    params: WaterParameters,
    target_ccpp: float,
    mode: TargetMode = TargetMode.PH,
    calibration: Optional[CalibrationProfile] = None,
) -> TargetSolution:
    """
    Search for the pH or calcium that yields a target CCPP.

    Args:
        params: Base water; every field except the free variable is held fixed
        target_ccpp: Desired CCPP (mg/L as CaCO₃)
        mode: TargetMode.PH or TargetMode.CALCIUM
        calibration: Calibration profile (supplies bracket and iterations)

    Returns:
        TargetSolution with found=True and the bracket midpoint, or
        found=False and value=None when the target is unreachable.
        The reported bracket is the one actually searched (pH bracket
        capped by the alkalinity).
    """
    calibration = calibration or DEFAULT_CALIBRATION
    mode = TargetMode(mode)
    low, high = _bracket_for(mode, calibration)

    if mode == TargetMode.PH:
        ph_limit = highest_consistent_ph(params, low, high, calibration)
        if ph_limit is None:
            logger.warning(
                f"Alkalinity {params.alkalinity_mg_L_CaCO3} mg/L as CaCO₃ cannot exist "
                f"anywhere in pH bracket [{low}, {high}]"
            )
            return TargetSolution(
                mode=mode,
                target_ccpp_mg_L_CaCO3=target_ccpp,
                found=False,
                bracket=(low, high),
            )
        if ph_limit < high:
            logger.info(
                f"pH bracket capped at {ph_limit:.3f}: hydroxide exceeds alkalinity "
                f"{params.alkalinity_mg_L_CaCO3} mg/L as CaCO₃ above it"
            )
            high = ph_limit

    ccpp_low = _ccpp_at(params, mode, low, calibration)
    ccpp_high = _ccpp_at(params, mode, high, calibration)

    if not (ccpp_low <= target_ccpp <= ccpp_high):
        logger.warning(
            f"Target CCPP {target_ccpp} mg/L unreachable in {mode.value} bracket "
            f"[{low}, {high}] (CCPP range {ccpp_low:.2f} to {ccpp_high:.2f} mg/L)"
        )
        return TargetSolution(
            mode=mode,
            target_ccpp_mg_L_CaCO3=target_ccpp,
            found=False,
            bracket=(low, high),
        )

    lo, hi = low, high
    for _ in range(calibration.target_iterations):
        mid = (lo + hi) / 2.0
        if _ccpp_at(params, mode, mid, calibration) < target_ccpp:
            lo = mid
        else:
            hi = mid

    value = (lo + hi) / 2.0
    achieved = _ccpp_at(params, mode, value, calibration)

    logger.info(
        f"Solved {mode.value}={value:.4f} for target CCPP {target_ccpp} mg/L "
        f"(achieved {achieved:.3f} mg/L)"
    )

    return TargetSolution(
        mode=mode,
        target_ccpp_mg_L_CaCO3=target_ccpp,
        found=True,
        value=value,
        achieved_ccpp_mg_L_CaCO3=achieved,
        bracket=(low, high),
    )
