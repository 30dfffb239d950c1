"""
Tier 1 Stability Tools - calcium carbonate equilibrium calculations.

These tools provide fast (~10 ms) calculations for:
- LSI, saturation pH, CCPP and equilibrium state
- Inverse CCPP solving (required pH or calcium)
- CCPP/LSI sensitivity sweeps

All tools use the pure-Python carbonate equilibrium engine in core/.
"""

from .water_stability import calculate_water_stability
from .target_ccpp import solve_target_ccpp
from .sensitivity import sensitivity_sweep
from .insight import build_insight_prompt, summarize_water_profile

__all__ = [
    "calculate_water_stability",
    "solve_target_ccpp",
    "sensitivity_sweep",
    "build_insight_prompt",
    "summarize_water_profile",
]
