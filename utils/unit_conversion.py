"""
Unit conversion helpers for carbonate chemistry.

Calcium hardness and alkalinity are carried as mg/L as CaCO₃ at every public
boundary. Inside the engine they are mol/L (calcium) and eq/L (alkalinity).
Both directions use the same CaCO₃ molar mass from the active calibration
profile; the alkalinity equivalent weight is always half of it.
"""


def mg_L_CaCO3_to_mol_L(concentration_mg_L: float, caco3_molar_mass_g_mol: float) -> float:
    """
    Convert mg/L as CaCO₃ to mol/L.

    Args:
        concentration_mg_L: Concentration in mg/L as CaCO₃
        caco3_molar_mass_g_mol: CaCO₃ molar mass in g/mol

    Returns:
        Concentration in mol/L
    """
    return concentration_mg_L / caco3_molar_mass_g_mol / 1000.0


def mol_L_to_mg_L_CaCO3(concentration_mol_L: float, caco3_molar_mass_g_mol: float) -> float:
    """Convert mol/L to mg/L as CaCO₃."""
    return concentration_mol_L * caco3_molar_mass_g_mol * 1000.0


def alkalinity_mg_L_CaCO3_to_eq_L(alkalinity_mg_L: float, caco3_molar_mass_g_mol: float) -> float:
    """
    Convert alkalinity from mg/L as CaCO₃ to eq/L.

    One mole of CaCO₃ neutralizes two equivalents of acid, so the
    equivalent weight is half the molar mass.
    """
    return alkalinity_mg_L / (caco3_molar_mass_g_mol / 2.0) / 1000.0


def alkalinity_eq_L_to_mg_L_CaCO3(alkalinity_eq_L: float, caco3_molar_mass_g_mol: float) -> float:
    """Convert alkalinity from eq/L to mg/L as CaCO₃."""
    return alkalinity_eq_L * (caco3_molar_mass_g_mol / 2.0) * 1000.0


def ph_to_activity(pH: float) -> float:
    """Hydrogen-ion activity from pH."""
    return 10.0 ** (-pH)
