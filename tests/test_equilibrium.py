"""
Tests for carbonate equilibrium primitives (core/equilibrium.py)

Validates:
- Literature values of pK1, pK2, pKw and pKs at 25°C
- Davies activity coefficients (ordering, zero ionic strength limit)
- Speciation fractions sum to one
- Equilibrium pH solver inverts the alkalinity definition
"""

import logging
import math

import pytest
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.calibration import CalibrationProfile, DEFAULT_CALIBRATION
from core.equilibrium import (
    DIVALENT_CHARGE_SQUARED,
    MONOVALENT_CHARGE_SQUARED,
    carbonate_alkalinity,
    davies_log_gamma,
    equilibrium_constants,
    solve_equilibrium_ph,
    speciation_fractions,
)
from utils.unit_conversion import ph_to_activity


# ============================================================================
# Equilibrium constants
# ============================================================================

class TestEquilibriumConstants:
    """Temperature dependence of K1, K2, Kw, Ks"""

    def test_pk1_at_25C(self):
        """Harned & Davis: pK1 ≈ 6.35 at 25°C"""
        constants = equilibrium_constants(25.0, 0.0)
        assert -math.log10(constants.K1) == pytest.approx(6.35, abs=0.01)

    def test_pk2_at_25C(self):
        """Harned & Scholes: pK2 ≈ 10.33 at 25°C"""
        constants = equilibrium_constants(25.0, 0.0)
        assert -math.log10(constants.K2) == pytest.approx(10.33, abs=0.01)

    def test_pkw_at_25C(self):
        constants = equilibrium_constants(25.0, 0.0)
        assert -math.log10(constants.Kw) == pytest.approx(14.0, abs=0.02)

    def test_pks_at_25C(self):
        """Plummer & Busenberg: calcite pKs ≈ 8.48 at 25°C"""
        constants = equilibrium_constants(25.0, 0.0)
        assert -math.log10(constants.Ks) == pytest.approx(8.48, abs=0.01)

    def test_calcite_less_soluble_when_hot(self):
        """Retrograde solubility: Ks falls with temperature"""
        cold = equilibrium_constants(5.0, 200.0)
        hot = equilibrium_constants(55.0, 200.0)
        assert hot.Ks < cold.Ks

    def test_ks_offset_applied(self):
        """log_ks_offset shifts log10(Ks) and nothing else"""
        shifted_profile = CalibrationProfile(log_ks_offset=0.1)
        base = equilibrium_constants(20.0, 200.0)
        shifted = equilibrium_constants(20.0, 200.0, shifted_profile)

        assert math.log10(shifted.Ks) - math.log10(base.Ks) == pytest.approx(0.1, abs=1e-12)
        assert shifted.K1 == base.K1
        assert shifted.K2 == base.K2
        assert shifted.gamma2 == base.gamma2

    def test_ionic_strength_from_tds(self):
        constants = equilibrium_constants(20.0, 400.0)
        assert constants.ionic_strength_M == pytest.approx(400.0 * 2.5e-5)

    def test_high_tds_logged_at_debug(self, caplog):
        """TDS above the Davies limit is noted at DEBUG; constants still returned"""
        with caplog.at_level(logging.DEBUG, logger="core.equilibrium"):
            constants = equilibrium_constants(20.0, 5000.0)

        assert constants.gamma1 > 0
        notes = [rec for rec in caplog.records if "validity range" in rec.getMessage()]
        assert len(notes) == 1
        assert notes[0].levelno == logging.DEBUG

    def test_constants_are_immutable(self):
        constants = equilibrium_constants(20.0, 200.0)
        with pytest.raises(AttributeError):
            constants.K1 = 1.0


# ============================================================================
# Activity coefficients
# ============================================================================

class TestActivityCoefficients:
    """Davies equation"""

    def test_zero_ionic_strength(self):
        """Pure water: γ = 1"""
        constants = equilibrium_constants(20.0, 0.0)
        assert constants.gamma1 == pytest.approx(1.0)
        assert constants.gamma2 == pytest.approx(1.0)

    @pytest.mark.parametrize("tds", [50.0, 200.0, 800.0, 2000.0])
    def test_divalent_below_monovalent(self, tds):
        """0 < γ₂ ≤ γ₁ ≤ 1 across the practical TDS range"""
        constants = equilibrium_constants(20.0, tds)
        assert 0.0 < constants.gamma2 <= constants.gamma1 <= 1.0

    def test_charge_scaling(self):
        """log γ scales with z²"""
        log_g1 = davies_log_gamma(MONOVALENT_CHARGE_SQUARED, 0.005, 20.0)
        log_g2 = davies_log_gamma(DIVALENT_CHARGE_SQUARED, 0.005, 20.0)
        assert log_g2 == pytest.approx(4.0 * log_g1, rel=1e-12)

    def test_lower_ionic_strength_factor_raises_gamma(self):
        profile = CalibrationProfile(ionic_strength_per_tds=1.9e-5)
        default = equilibrium_constants(20.0, 500.0, DEFAULT_CALIBRATION)
        lower = equilibrium_constants(20.0, 500.0, profile)
        assert lower.gamma2 > default.gamma2


# ============================================================================
# Speciation
# ============================================================================

class TestSpeciation:
    """Carbonate speciation fractions"""

    @pytest.mark.parametrize("pH", [4.0, 5.5, 6.35, 7.0, 8.3, 10.3, 12.0, 13.0])
    @pytest.mark.parametrize("temperature_C", [0.0, 25.0, 60.0])
    def test_fractions_sum_to_one(self, pH, temperature_C):
        constants = equilibrium_constants(temperature_C, 300.0)
        alphas = speciation_fractions(ph_to_activity(pH), constants)

        assert alphas.alpha0 + alphas.alpha1 + alphas.alpha2 == pytest.approx(1.0, abs=1e-9)
        assert min(alphas.alpha0, alphas.alpha1, alphas.alpha2) >= 0.0

    def test_bicarbonate_dominates_near_neutral(self):
        constants = equilibrium_constants(25.0, 0.0)
        alphas = speciation_fractions(ph_to_activity(8.3), constants)
        assert alphas.alpha1 > 0.95

    def test_equal_split_at_pk1(self):
        """At pH = pK1 in pure water, [H₂CO₃*] ≈ [HCO₃⁻]"""
        constants = equilibrium_constants(25.0, 0.0)
        pk1 = -math.log10(constants.K1)
        alphas = speciation_fractions(ph_to_activity(pk1), constants)
        assert alphas.alpha0 == pytest.approx(alphas.alpha1, rel=1e-3)


# ============================================================================
# Equilibrium pH solver
# ============================================================================

class TestEquilibriumPhSolver:
    """Bisection on the alkalinity definition"""

    @pytest.mark.parametrize("pH", [6.0, 7.2, 8.2, 9.5])
    def test_inverts_alkalinity(self, pH):
        """Solving for the alkalinity computed at a pH returns that pH"""
        constants = equilibrium_constants(20.0, 200.0)
        total_carbon = 2e-3
        alkalinity = carbonate_alkalinity(total_carbon, ph_to_activity(pH), constants)

        solved = solve_equilibrium_ph(alkalinity, total_carbon, constants)
        assert solved == pytest.approx(pH, abs=1e-8)

    def test_alkalinity_increases_with_ph(self):
        constants = equilibrium_constants(20.0, 200.0)
        values = [
            carbonate_alkalinity(2e-3, ph_to_activity(pH), constants)
            for pH in (5.0, 6.0, 7.0, 8.0, 9.0, 10.0, 11.0)
        ]
        assert values == sorted(values)

    def test_result_within_bracket(self):
        """Unreachable targets end at the bracket edge"""
        constants = equilibrium_constants(20.0, 200.0)
        low, high = DEFAULT_CALIBRATION.ph_solver_bracket

        solved = solve_equilibrium_ph(10.0, 1e-3, constants)
        assert low <= solved <= high
        assert solved == pytest.approx(high, abs=1e-6)
