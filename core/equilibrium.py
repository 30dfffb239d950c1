"""
Carbonate equilibrium primitives.

This module provides the three leaf stages of the stability engine:
- Temperature/ionic-strength dependent equilibrium constants (K1, K2, Kw, Ks)
  and Davies activity coefficients (γ₁ monovalent, γ₂ divalent)
- Carbonate speciation fractions (α₀, α₁, α₂)
- Equilibrium pH from alkalinity and total inorganic carbon (bisection)

References:
    - Plummer, L. N., & Busenberg, E. (1982). "The solubilities of calcite,
      aragonite and vaterite in CO2-H2O solutions between 0 and 90°C".
      Geochim. Cosmochim. Acta, 46(6), 1011-1040.
    - Harned, H. S., & Davis, R. D. (1943); Harned, H. S., & Scholes, S. R. (1941)
      carbonic acid dissociation constants.
    - Davies, C. W. (1962). Ion Association. Butterworths, London.

Accuracy boundary:
    The ionic strength is estimated linearly from TDS. Above ~2000 mg/L TDS the
    Davies approximation leaves its validity range; results are still returned.
"""

from dataclasses import dataclass
import logging
import math

from core.calibration import CalibrationProfile, DEFAULT_CALIBRATION
from utils.unit_conversion import ph_to_activity

logger = logging.getLogger(__name__)


# Absolute zero offset (K)
KELVIN_OFFSET = 273.15

# TDS above which the Davies equation is outside its validity range (mg/L)
DAVIES_TDS_LIMIT_MG_L = 2000.0

# Charge-squared factors used in the Davies equation
MONOVALENT_CHARGE_SQUARED = 1
DIVALENT_CHARGE_SQUARED = 4


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EquilibriumConstants:
    """
    Equilibrium constants and activity coefficients at one temperature/TDS.

    Attributes:
        K1: First dissociation constant of carbonic acid
        K2: Second dissociation constant of carbonic acid
        Kw: Ion product of water
        Ks: Calcite solubility product (includes the calibration offset)
        gamma1: Monovalent activity coefficient (H⁺, HCO₃⁻, OH⁻)
        gamma2: Divalent activity coefficient (Ca²⁺, CO₃²⁻)
        ionic_strength_M: Estimated ionic strength (mol/L)
    """
    K1: float
    K2: float
    Kw: float
    Ks: float
    gamma1: float
    gamma2: float
    ionic_strength_M: float


@dataclass(frozen=True)
class SpeciationFractions:
    """Fractions of total inorganic carbon as H₂CO₃*, HCO₃⁻ and CO₃²⁻."""
    alpha0: float
    alpha1: float
    alpha2: float


# ---------------------------------------------------------------------------
# Constants provider
# ---------------------------------------------------------------------------

def davies_log_gamma(
    charge_squared: int,
    ionic_strength_M: float,
    temperature_C: float,
    calibration: CalibrationProfile = DEFAULT_CALIBRATION,
) -> float:
    """
    Davies equation: log γ = -A(T)·z²·(√I/(1+√I) − 0.3·I)

    A(T) is a quadratic fit in Celsius taken from the calibration profile.
    """
    sqrt_i = math.sqrt(ionic_strength_M)
    a_dh = (
        calibration.davies_a0
        + calibration.davies_a1 * temperature_C
        + calibration.davies_a2 * temperature_C ** 2
    )
    davies_term = sqrt_i / (1.0 + sqrt_i) - calibration.davies_linear_coefficient * ionic_strength_M
    return -a_dh * charge_squared * davies_term


def equilibrium_constants(
    temperature_C: float,
    tds_mg_L: float,
    calibration: CalibrationProfile = DEFAULT_CALIBRATION,
) -> EquilibriumConstants:
    """
    Derive K1, K2, Kw, Ks and activity coefficients for a water.

    Args:
        temperature_C: Water temperature (°C), valid 0-60
        tds_mg_L: Total dissolved solids (mg/L), ≥ 0
        calibration: Calibration profile (ionic-strength factor, Ks offset, A(T))

    Returns:
        EquilibriumConstants (recomputed on every call, never cached)
    """
    temp_K = temperature_C + KELVIN_OFFSET

    if tds_mg_L > DAVIES_TDS_LIMIT_MG_L:
        logger.debug(
            f"TDS {tds_mg_L:.0f} mg/L exceeds {DAVIES_TDS_LIMIT_MG_L:.0f} mg/L; "
            "Davies activity correction is outside its validity range"
        )

    ionic_strength = calibration.ionic_strength_per_tds * tds_mg_L

    gamma1 = 10.0 ** davies_log_gamma(MONOVALENT_CHARGE_SQUARED, ionic_strength, temperature_C, calibration)
    gamma2 = 10.0 ** davies_log_gamma(DIVALENT_CHARGE_SQUARED, ionic_strength, temperature_C, calibration)

    # pK = -log10 K, absolute temperature fits
    # pK1 = 6.35 and pK2 = 10.33 at 25°C
    pK1 = 3404.71 / temp_K - 14.8435 + 0.032786 * temp_K
    pK2 = 2902.39 / temp_K - 6.4980 + 0.02379 * temp_K
    pKw = 4470.99 / temp_K - 6.0875 + 0.01706 * temp_K
    pKs = 171.9065 + 0.077993 * temp_K - 2839.319 / temp_K - 71.595 * math.log10(temp_K)

    log_Ks = -pKs + calibration.log_ks_offset

    return EquilibriumConstants(
        K1=10.0 ** (-pK1),
        K2=10.0 ** (-pK2),
        Kw=10.0 ** (-pKw),
        Ks=10.0 ** log_Ks,
        gamma1=gamma1,
        gamma2=gamma2,
        ionic_strength_M=ionic_strength,
    )


# ---------------------------------------------------------------------------
# Speciation
# ---------------------------------------------------------------------------

def speciation_fractions(hydrogen_activity: float, constants: EquilibriumConstants) -> SpeciationFractions:
    """
    Activity-corrected carbonate speciation fractions.

    K1 = aH·[HCO₃⁻]·γ₁ / [H₂CO₃*]      → [HCO₃⁻]/[H₂CO₃*] = K1/(aH·γ₁)
    K2 = aH·[CO₃²⁻]·γ₂ / ([HCO₃⁻]·γ₁)  → [CO₃²⁻]/[H₂CO₃*] = K1·K2/(aH²·γ₂)
    """
    term1 = constants.K1 / (hydrogen_activity * constants.gamma1)
    term2 = (constants.K1 * constants.K2) / (hydrogen_activity ** 2 * constants.gamma2)

    alpha0 = 1.0 / (1.0 + term1 + term2)
    return SpeciationFractions(
        alpha0=alpha0,
        alpha1=term1 * alpha0,
        alpha2=term2 * alpha0,
    )


def carbonate_alkalinity(
    total_carbon_mol_L: float,
    hydrogen_activity: float,
    constants: EquilibriumConstants,
) -> float:
    """
    Alkalinity (eq/L) = CT·(α₁ + 2α₂) + [OH⁻] − [H⁺]
    """
    alphas = speciation_fractions(hydrogen_activity, constants)
    hydroxide = constants.Kw / (hydrogen_activity * constants.gamma1)
    hydrogen = hydrogen_activity / constants.gamma1
    return total_carbon_mol_L * (alphas.alpha1 + 2.0 * alphas.alpha2) + hydroxide - hydrogen


# ---------------------------------------------------------------------------
# Equilibrium pH solver
# ---------------------------------------------------------------------------

def solve_equilibrium_ph(
    alkalinity_eq_L: float,
    total_carbon_mol_L: float,
    constants: EquilibriumConstants,
    calibration: CalibrationProfile = DEFAULT_CALIBRATION,
) -> float:
    """
    Find the pH at which the alkalinity definition matches a target.

    Calculated alkalinity increases strictly with pH, so a fixed-iteration
    bisection over the calibration bracket converges without an initial
    guess. 40 halvings of a 9-unit bracket leave < 1e-11 pH units.

    Args:
        alkalinity_eq_L: Target alkalinity (eq/L)
        total_carbon_mol_L: Total inorganic carbon (mol/L)
        constants: Equilibrium constants for the water
        calibration: Supplies the bracket and iteration count

    Returns:
        Midpoint of the final bracket (pH)
    """
    low_ph, high_ph = calibration.ph_solver_bracket

    for _ in range(calibration.ph_solver_iterations):
        ph = (low_ph + high_ph) / 2.0
        calc_alk = carbonate_alkalinity(total_carbon_mol_L, ph_to_activity(ph), constants)

        if calc_alk < alkalinity_eq_L:
            low_ph = ph
        else:
            high_ph = ph

    return (low_ph + high_ph) / 2.0
