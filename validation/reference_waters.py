"""
Reference water profiles for benchmarking the stability engine.

The profiles span the practical potable-water range: soft corrosive surface
water, typical distribution water, hard groundwater, remineralized RO
permeate and a hot-water system. Expected values are not stored here; each
profile is compared against an independent model (PHREEQC) at run time.
"""

from typing import List, Optional
from dataclasses import dataclass, field

from core.schemas import WaterParameters


@dataclass
class ReferenceWater:
    """
    Single benchmark water.

    Attributes:
        case_id: Unique identifier
        description: Water description
        params: Engine inputs
        notes: Additional notes about the water
    """
    case_id: str
    description: str
    params: WaterParameters
    notes: str = ""
    tags: List[str] = field(default_factory=list)


REFERENCE_WATERS: List[ReferenceWater] = [
    ReferenceWater(
        case_id="SOFT_SURFACE",
        description="Soft, low-alkalinity surface water",
        params=WaterParameters(
            pH=7.0, temperature_C=10.0, tds_mg_L=60.0,
            calcium_mg_L_CaCO3=20.0, alkalinity_mg_L_CaCO3=15.0,
        ),
        notes="Strongly undersaturated; typical lead/copper corrosion concern",
        tags=["corrosive"],
    ),
    ReferenceWater(
        case_id="DISTRIBUTION_TYPICAL",
        description="Typical treated distribution water",
        params=WaterParameters(
            pH=7.8, temperature_C=20.0, tds_mg_L=200.0,
            calcium_mg_L_CaCO3=150.0, alkalinity_mg_L_CaCO3=120.0,
        ),
        notes="Near saturation, slightly scale-forming",
        tags=["balanced"],
    ),
    ReferenceWater(
        case_id="HARD_GROUNDWATER",
        description="Hard, high-alkalinity groundwater",
        params=WaterParameters(
            pH=7.4, temperature_C=15.0, tds_mg_L=450.0,
            calcium_mg_L_CaCO3=250.0, alkalinity_mg_L_CaCO3=220.0,
        ),
        notes="Scale-forming once CO2 is stripped",
        tags=["scaling"],
    ),
    ReferenceWater(
        case_id="REMINERALIZED_RO",
        description="Remineralized reverse osmosis permeate",
        params=WaterParameters(
            pH=8.3, temperature_C=20.0, tds_mg_L=150.0,
            calcium_mg_L_CaCO3=60.0, alkalinity_mg_L_CaCO3=50.0,
        ),
        notes="Post-treatment target of slightly positive CCPP",
        tags=["balanced"],
    ),
    ReferenceWater(
        case_id="HOT_WATER",
        description="Domestic hot-water system",
        params=WaterParameters(
            pH=7.8, temperature_C=55.0, tds_mg_L=300.0,
            calcium_mg_L_CaCO3=150.0, alkalinity_mg_L_CaCO3=120.0,
        ),
        notes="Elevated temperature lowers calcite solubility",
        tags=["scaling"],
    ),
]


def get_reference_water(case_id: str) -> Optional[ReferenceWater]:
    """Get a reference water by ID"""
    for water in REFERENCE_WATERS:
        if water.case_id == case_id:
            return water
    return None
