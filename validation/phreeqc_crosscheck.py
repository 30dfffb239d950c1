"""
Cross-validation of the stability engine against PHREEQC.

PHREEQC (via phreeqpython) computes the calcite saturation index of the same
water with its own thermodynamic database and activity model. Agreement
within a few tenths of an SI unit confirms the engine's constants and unit
conversions; larger gaps point to a calibration problem.

Mapping:
    - Ca: mg/L as CaCO₃ → mg/L as Ca (× 40.078 / CaCO₃ molar mass)
    - Alkalinity: mg/L as CaCO₃ (PHREEQC's own Alkalinity convention)
    - Background NaCl fills the TDS-derived ionic strength not carried by
      Ca²⁺/HCO₃⁻, so both models see a comparable ionic strength

Thread Safety:
    Each thread gets its own PhreeqPython instance (threading.local()).
"""

from typing import Optional
from dataclasses import dataclass
import logging
import threading

import phreeqpython

from core.calibration import CalibrationProfile, DEFAULT_CALIBRATION
from core.schemas import WaterParameters
from core.stability_engine import evaluate
from utils.unit_conversion import alkalinity_mg_L_CaCO3_to_eq_L, mg_L_CaCO3_to_mol_L

logger = logging.getLogger(__name__)


# Atomic/molecular weights (g/mol)
MW_CA = 40.078
MW_NACL = 58.44


@dataclass
class CrossCheckResult:
    """
    Engine LSI versus PHREEQC calcite SI for one water.

    Attributes:
        engine_lsi: LSI from the stability engine
        phreeqc_si_calcite: Calcite SI from PHREEQC
        difference: engine_lsi - phreeqc_si_calcite
        engine_ionic_strength_M: TDS-derived ionic strength used by the engine
        phreeqc_ionic_strength_M: Ionic strength computed by PHREEQC
    """
    engine_lsi: float
    phreeqc_si_calcite: float
    difference: float
    engine_ionic_strength_M: float
    phreeqc_ionic_strength_M: float


class PhreeqcCrossCheck:
    """Compute calcite SI with PHREEQC for engine inputs."""

    _thread_local = threading.local()

    def __init__(
        self,
        database: str = "phreeqc.dat",
        calibration: Optional[CalibrationProfile] = None,
    ):
        self.database = database
        self.calibration = calibration or DEFAULT_CALIBRATION

    def _get_phreeqc(self) -> phreeqpython.PhreeqPython:
        """Get thread-local PHREEQC instance."""
        if not hasattr(self._thread_local, "pp"):
            logger.debug(f"Creating new PHREEQC instance for thread {threading.current_thread().name}")
            self._thread_local.pp = phreeqpython.PhreeqPython(database=self.database)
        return self._thread_local.pp

    def _background_nacl_mg_L(self, params: WaterParameters) -> float:
        """NaCl (mg/L) that brings ionic strength up to the engine's TDS estimate."""
        molar_mass = self.calibration.caco3_molar_mass_g_mol
        ca_mol = mg_L_CaCO3_to_mol_L(params.calcium_mg_L_CaCO3, molar_mass)
        alk_eq = alkalinity_mg_L_CaCO3_to_eq_L(params.alkalinity_mg_L_CaCO3, molar_mass)

        target_ionic_strength = self.calibration.ionic_strength_per_tds * params.tds_mg_L
        carbonate_ionic_strength = 0.5 * (4.0 * ca_mol + alk_eq)
        nacl_mol = max(0.0, target_ionic_strength - carbonate_ionic_strength)
        return nacl_mol * MW_NACL * 1000.0

    def calcite_si(self, params: WaterParameters) -> tuple:
        """
        Run PHREEQC speciation at the measured pH.

        Returns:
            (si_calcite, ionic_strength_M)

        Raises:
            RuntimeError: If PHREEQC fails
        """
        pp = self._get_phreeqc()

        nacl_mg_L = self._background_nacl_mg_L(params)
        solution = {
            "units": "mg/L",
            "temp": params.temperature_C,
            "pH": params.pH,
            "Ca": params.calcium_mg_L_CaCO3 * MW_CA / self.calibration.caco3_molar_mass_g_mol,
            "Alkalinity": params.alkalinity_mg_L_CaCO3,
        }
        if nacl_mg_L > 0:
            solution["Na"] = nacl_mg_L * 22.99 / MW_NACL
            solution["Cl"] = nacl_mg_L * 35.45 / MW_NACL

        try:
            sol = pp.add_solution(solution)
        except Exception as e:
            logger.error(f"PHREEQC error: {e}")
            raise RuntimeError(f"PHREEQC speciation failed: {e}") from e

        si_calcite = sol.si("Calcite")
        ionic_strength = sol.I
        sol.forget()

        return si_calcite, ionic_strength

    def compare(self, params: WaterParameters) -> CrossCheckResult:
        """Compare engine LSI with PHREEQC calcite SI."""
        result = evaluate(params, self.calibration)
        si_calcite, ionic_strength = self.calcite_si(params)

        return CrossCheckResult(
            engine_lsi=result.lsi,
            phreeqc_si_calcite=si_calcite,
            difference=result.lsi - si_calcite,
            engine_ionic_strength_M=self.calibration.ionic_strength_per_tds * params.tds_mg_L,
            phreeqc_ionic_strength_M=ionic_strength,
        )
