"""
Tests for unit conversion helpers (utils/unit_conversion.py)
"""

import pytest
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.unit_conversion import (
    alkalinity_eq_L_to_mg_L_CaCO3,
    alkalinity_mg_L_CaCO3_to_eq_L,
    mg_L_CaCO3_to_mol_L,
    mol_L_to_mg_L_CaCO3,
    ph_to_activity,
)


MW_CACO3 = 100.09


class TestCalciumConversion:
    """mg/L as CaCO3 ↔ mol/L"""

    def test_one_millimole(self):
        """100.09 mg/L as CaCO3 is 1 mmol/L"""
        assert mg_L_CaCO3_to_mol_L(100.09, MW_CACO3) == pytest.approx(1e-3, rel=1e-12)

    def test_back_conversion(self):
        assert mol_L_to_mg_L_CaCO3(1.5e-3, MW_CACO3) == pytest.approx(150.135, rel=1e-12)

    def test_molar_mass_is_a_parameter(self):
        """A different molar mass changes the molar value proportionally"""
        a = mg_L_CaCO3_to_mol_L(150.0, 100.09)
        b = mg_L_CaCO3_to_mol_L(150.0, 100.08)
        assert a / b == pytest.approx(100.08 / 100.09, rel=1e-12)


class TestAlkalinityConversion:
    """mg/L as CaCO3 ↔ eq/L (equivalent weight = half the molar mass)"""

    def test_one_milliequivalent(self):
        """50.045 mg/L as CaCO3 is 1 meq/L"""
        assert alkalinity_mg_L_CaCO3_to_eq_L(50.045, MW_CACO3) == pytest.approx(1e-3, rel=1e-12)

    def test_alkalinity_is_twice_molar(self):
        """Same mg/L as CaCO3 gives twice as many equivalents as moles"""
        eq = alkalinity_mg_L_CaCO3_to_eq_L(120.0, MW_CACO3)
        mol = mg_L_CaCO3_to_mol_L(120.0, MW_CACO3)
        assert eq == pytest.approx(2.0 * mol, rel=1e-12)

    def test_back_conversion(self):
        eq = alkalinity_mg_L_CaCO3_to_eq_L(120.0, MW_CACO3)
        assert alkalinity_eq_L_to_mg_L_CaCO3(eq, MW_CACO3) == pytest.approx(120.0, rel=1e-12)


class TestPhActivity:
    """pH → hydrogen-ion activity"""

    def test_neutral(self):
        assert ph_to_activity(7.0) == pytest.approx(1e-7, rel=1e-12)
