"""
MCP tool implementations for water stability.

Tools are organized by tier:
- Tier 1: Calcium carbonate stability (LSI, CCPP, inverse solving, sweeps)
"""

from tools.stability.water_stability import calculate_water_stability
from tools.stability.target_ccpp import solve_target_ccpp
from tools.stability.sensitivity import sensitivity_sweep

__all__ = [
    "calculate_water_stability",
    "solve_target_ccpp",
    "sensitivity_sweep",
]
