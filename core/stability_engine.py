"""
Calcium carbonate stability engine (LSI, saturation pH, CCPP).

Pipeline:
    WaterParameters → constants → speciation / pH solves → CalculationResult

Design:
    - Pure function of (WaterParameters, CalibrationProfile); no hidden state
    - Every solver is a fixed-iteration bisection (deterministic latency)
    - Closed system during precipitation: Ca, alkalinity and CT move together
    - Intermediate trial states are clamped, inputs never are

CCPP definition:
    x (mol/L) of CaCO₃ precipitates (x > 0) or dissolves (x < 0) until the
    re-equilibrated solution has saturation index 0:
        Ca  → Ca − x
        Alk → Alk − 2x   (one mole CaCO₃ carries two equivalents)
        CT  → CT − x

Usage:
    >>> params = WaterParameters(pH=7.8, temperature_C=20, tds_mg_L=200,
    ...                          calcium_mg_L_CaCO3=150, alkalinity_mg_L_CaCO3=120)
    >>> result = evaluate(params)
    >>> result.saturation_condition
    <SaturationCondition.OVERSATURATED: 'Oversaturated'>
"""

from typing import Optional
import logging
import math

from core.calibration import CalibrationProfile, DEFAULT_CALIBRATION
from core.equilibrium import (
    EquilibriumConstants,
    equilibrium_constants,
    solve_equilibrium_ph,
    speciation_fractions,
)
from core.schemas import CalculationResult, SaturationCondition, WaterParameters
from utils.unit_conversion import (
    alkalinity_eq_L_to_mg_L_CaCO3,
    alkalinity_mg_L_CaCO3_to_eq_L,
    mg_L_CaCO3_to_mol_L,
    mol_L_to_mg_L_CaCO3,
    ph_to_activity,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def total_inorganic_carbon(
    alkalinity_eq_L: float,
    pH: float,
    constants: EquilibriumConstants,
) -> float:
    """
    Solve the alkalinity equation algebraically for CT at a known pH.

    CT = (Alk − [OH⁻] + [H⁺]) / (α₁ + 2α₂)

    May return a value ≤ 0 when hydroxide alone exceeds the alkalinity.
    """
    a_h = ph_to_activity(pH)
    alphas = speciation_fractions(a_h, constants)
    hydroxide = constants.Kw / (a_h * constants.gamma1)
    hydrogen = a_h / constants.gamma1
    return (alkalinity_eq_L - hydroxide + hydrogen) / (alphas.alpha1 + 2.0 * alphas.alpha2)


def saturation_index(
    calcium_mol_L: float,
    carbonate_mol_L: float,
    constants: EquilibriumConstants,
) -> float:
    """
    SI = log10( [Ca²⁺]·γ₂ · [CO₃²⁻]·γ₂ / Ks )
    """
    iap = (calcium_mol_L * constants.gamma2) * (carbonate_mol_L * constants.gamma2)
    return math.log10(iap / constants.Ks)


def saturation_ph(
    calcium_mol_L: float,
    alkalinity_eq_L: float,
    constants: EquilibriumConstants,
    calibration: CalibrationProfile = DEFAULT_CALIBRATION,
) -> float:
    """
    pH at which the current calcium and alkalinity are exactly saturated.

    Holding alkalinity fixed, carbonate activity rises with pH, so SI is
    monotonic over the bracket. A trial pH whose CT would be ≤ 0 lies
    beyond any attainable state and is treated as above pHs.
    """
    low_ph, high_ph = calibration.saturation_ph_bracket

    for _ in range(calibration.saturation_ph_iterations):
        trial_ph = (low_ph + high_ph) / 2.0
        ct_trial = total_inorganic_carbon(alkalinity_eq_L, trial_ph, constants)

        if ct_trial <= 0:
            high_ph = trial_ph
            continue

        alphas = speciation_fractions(ph_to_activity(trial_ph), constants)
        si = saturation_index(calcium_mol_L, ct_trial * alphas.alpha2, constants)

        if si < 0:
            low_ph = trial_ph
        else:
            high_ph = trial_ph

    return (low_ph + high_ph) / 2.0


def classify_saturation(
    lsi: float,
    calibration: CalibrationProfile = DEFAULT_CALIBRATION,
) -> SaturationCondition:
    """Classify LSI against the symmetric ±saturation_threshold band."""
    threshold = calibration.saturation_threshold
    if lsi > threshold:
        return SaturationCondition.OVERSATURATED
    if lsi < -threshold:
        return SaturationCondition.UNDERSATURATED
    return SaturationCondition.SATURATED


def precipitation_potential_mol_L(
    calcium_mol_L: float,
    alkalinity_eq_L: float,
    total_carbon_mol_L: float,
    constants: EquilibriumConstants,
    calibration: CalibrationProfile = DEFAULT_CALIBRATION,
) -> float:
    """
    Moles/L of CaCO₃ that must precipitate (positive) or dissolve (negative)
    for the closed system to reach SI = 0.

    Trials that drive Ca, alkalinity or CT to ≤ 0 are not passed to the pH
    solver; they are treated as overshooting in the direction of x.
    """
    floor = calibration.concentration_floor_mol_L
    low_x = -calibration.ccpp_bracket_mol_L
    high_x = calibration.ccpp_bracket_mol_L

    for _ in range(calibration.ccpp_iterations):
        x = (low_x + high_x) / 2.0
        ca_x = calcium_mol_L - x
        alk_x = alkalinity_eq_L - 2.0 * x
        ct_x = total_carbon_mol_L - x

        if ca_x <= 0 or alk_x <= 0 or ct_x <= 0:
            if x > 0:
                high_x = x
            else:
                low_x = x
            continue

        # lifts values in (0, floor) to the floor
        ca_x = max(ca_x, floor)
        alk_x = max(alk_x, floor)
        ct_x = max(ct_x, floor)

        ph_x = solve_equilibrium_ph(alk_x, ct_x, constants, calibration)
        alphas_x = speciation_fractions(ph_to_activity(ph_x), constants)
        si_x = saturation_index(ca_x, ct_x * alphas_x.alpha2, constants)

        if si_x > 0:
            low_x = x
        else:
            high_x = x

    return (low_x + high_x) / 2.0


# ---------------------------------------------------------------------------
# Engine entry point
# ---------------------------------------------------------------------------

def evaluate(
    params: WaterParameters,
    calibration: Optional[CalibrationProfile] = None,
) -> CalculationResult:
    """
    Compute LSI, saturation pH, CCPP and the equilibrium state of a water.

    Args:
        params: Validated water parameters
        calibration: Calibration profile (default: DEFAULT_CALIBRATION)

    Returns:
        CalculationResult (calcium/alkalinity in mg/L as CaCO₃)

    Raises:
        ValueError: If the pH is unattainable for the stated alkalinity
                    (hydroxide alone exceeds it, so CT would be ≤ 0)
    """
    calibration = calibration or DEFAULT_CALIBRATION
    molar_mass = calibration.caco3_molar_mass_g_mol

    constants = equilibrium_constants(params.temperature_C, params.tds_mg_L, calibration)

    ca_mol = mg_L_CaCO3_to_mol_L(params.calcium_mg_L_CaCO3, molar_mass)
    alk_eq = alkalinity_mg_L_CaCO3_to_eq_L(params.alkalinity_mg_L_CaCO3, molar_mass)

    # 1. Initial total inorganic carbon
    ct_init = total_inorganic_carbon(alk_eq, params.pH, constants)
    if ct_init <= 0:
        raise ValueError(
            f"pH {params.pH} is inconsistent with alkalinity "
            f"{params.alkalinity_mg_L_CaCO3} mg/L as CaCO₃: hydroxide alone exceeds "
            "the stated alkalinity"
        )

    # 2. Initial LSI
    alphas_init = speciation_fractions(ph_to_activity(params.pH), constants)
    lsi = saturation_index(ca_mol, ct_init * alphas_init.alpha2, constants)

    # 3. Saturation pH
    ph_s = saturation_ph(ca_mol, alk_eq, constants, calibration)

    # 4. CCPP
    x_mol = precipitation_potential_mol_L(ca_mol, alk_eq, ct_init, constants, calibration)
    ccpp = mol_L_to_mg_L_CaCO3(x_mol, molar_mass)

    # 5. Equilibrium state
    floor = calibration.concentration_floor_mol_L
    eq_alk_eq = alk_eq - 2.0 * x_mol
    eq_ca_mol = ca_mol - x_mol
    eq_ph = solve_equilibrium_ph(
        max(eq_alk_eq, floor),
        max(ct_init - x_mol, floor),
        constants,
        calibration,
    )

    logger.debug(
        f"LSI={lsi:.3f}, pHs={ph_s:.3f}, CCPP={ccpp:.3f} mg/L, pHeq={eq_ph:.3f}"
    )

    return CalculationResult(
        lsi=lsi,
        ccpp_mg_L_CaCO3=ccpp,
        saturation_pH=ph_s,
        saturation_condition=classify_saturation(lsi, calibration),
        equilibrium_pH=eq_ph,
        equilibrium_alkalinity_mg_L_CaCO3=max(0.0, alkalinity_eq_L_to_mg_L_CaCO3(eq_alk_eq, molar_mass)),
        equilibrium_calcium_mg_L_CaCO3=max(0.0, mol_L_to_mg_L_CaCO3(eq_ca_mol, molar_mass)),
    )
