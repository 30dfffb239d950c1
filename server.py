"""
Water Stability MCP Server

FastMCP server providing calcium carbonate stability tools for AI agents.

Architecture:
- Tier 1: Carbonate equilibrium engine (LSI, saturation pH, CCPP) (~10 ms)
- Tier 1: Inverse CCPP solver (required pH or calcium) (~0.5 sec)
- Tier 1: CCPP/LSI sensitivity sweeps (~0.5 sec)
- Commentary: expert summary via MCP sampling (client LLM, optional)

Usage:
    python server.py
"""

from fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations
import anyio
import logging
from typing import Literal, Optional

from core.calibration import get_calibration_profile, load_calibration_profiles
from core.schemas import WaterParameters
from core.stability_engine import evaluate
from tools.stability.water_stability import (
    ENGINE_VERSION,
    calculate_water_stability,
    format_result,
)
from tools.stability.target_ccpp import solve_target_ccpp
from tools.stability.sensitivity import sensitivity_sweep
from tools.stability.insight import summarize_water_profile_async

# Pydantic imports for input validation
from pydantic import BaseModel, ConfigDict, Field

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# ============================================================================
# Pydantic Input Models
# ============================================================================

class WaterProfileInput(BaseModel):
    """Measured water parameters shared by all stability tools."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    pH: float = Field(
        ...,
        description="Measured pH",
        gt=0.0,
        lt=14.0
    )
    temperature_C: float = Field(
        ...,
        description="Water temperature in Celsius (0-60°C)",
        ge=0.0,
        le=60.0
    )
    tds_mg_L: float = Field(
        ...,
        description="Total dissolved solids in mg/L (Davies correction valid to ~2000 mg/L)",
        ge=0.0
    )
    calcium_mg_L_CaCO3: float = Field(
        ...,
        description="Calcium hardness in mg/L as CaCO3",
        gt=0.0
    )
    alkalinity_mg_L_CaCO3: float = Field(
        ...,
        description="Total alkalinity in mg/L as CaCO3",
        gt=0.0
    )
    calibration_profile: str = Field(
        default="default",
        description="Calibration profile name (see stability_list_calibration_profiles)",
        min_length=1,
        max_length=100
    )


class SolveTargetInput(WaterProfileInput):
    """Input for the inverse CCPP solver."""
    target_ccpp_mg_L_CaCO3: float = Field(
        ...,
        description="Desired CCPP in mg/L as CaCO3 (e.g., 4-10 for a protective layer)"
    )
    mode: Literal["pH", "calcium"] = Field(
        default="pH",
        description="Free variable: 'pH' (calcium held fixed) or 'calcium' (pH held fixed)"
    )


class SensitivitySweepInput(WaterProfileInput):
    """Input for CCPP/LSI sensitivity sweeps."""
    variable: Literal["pH", "calcium"] = Field(
        default="pH",
        description="Swept variable"
    )
    start: Optional[float] = Field(default=None, description="Grid start (default 7.0 pH or calcium-150)")
    stop: Optional[float] = Field(default=None, description="Grid stop (default 9.0 pH or calcium+150)")
    step: Optional[float] = Field(default=None, description="Grid step (default 0.05 pH or 5 mg/L)", gt=0.0)


def _profile_kwargs(params: WaterProfileInput) -> dict:
    return {
        "pH": params.pH,
        "temperature_C": params.temperature_C,
        "tds_mg_L": params.tds_mg_L,
        "calcium_mg_L_CaCO3": params.calcium_mg_L_CaCO3,
        "alkalinity_mg_L_CaCO3": params.alkalinity_mg_L_CaCO3,
        "calibration_profile": params.calibration_profile,
    }


# ============================================================================
# Initialize FastMCP Server
# ============================================================================

mcp = FastMCP("Water Stability")


# ============================================================================
# Tier 1: Stability Tools
# ============================================================================

@mcp.tool(
    name="stability_calculate_water_stability",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def calculate_stability(params: WaterProfileInput) -> dict:
    """
    Calculate LSI, saturation pH, CCPP and equilibrium state of a potable water.

    - LSI > 0 / CCPP > 0: Scaling tendency (CaCO₃ precipitates)
    - LSI < 0 / CCPP < 0: Corrosive tendency (CaCO₃ dissolves)

    Args:
        params (WaterProfileInput): pH, temperature_C, tds_mg_L,
            calcium_mg_L_CaCO3, alkalinity_mg_L_CaCO3, calibration_profile

    Returns:
        Dictionary with lsi, ccpp_mg_L_CaCO3, pH_saturation, saturation_condition,
        equilibrium state, interpretation and provenance.

    Example:
        result = await calculate_stability(WaterProfileInput(
            pH=7.8, temperature_C=20, tds_mg_L=200,
            calcium_mg_L_CaCO3=150, alkalinity_mg_L_CaCO3=120
        ))
        print(result["ccpp_mg_L_CaCO3"])
    """
    logger.info(f"Water stability requested (pH={params.pH}, T={params.temperature_C}°C)")

    # Wrap sync call to prevent blocking event loop
    return await anyio.to_thread.run_sync(
        lambda: calculate_water_stability(**_profile_kwargs(params))
    )


@mcp.tool(
    name="stability_solve_target_ccpp",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def solve_target(params: SolveTargetInput) -> dict:
    """
    Find the pH (calcium fixed) or calcium (pH fixed) that gives a target CCPP.

    Temperature, TDS and alkalinity are held constant. If the target cannot be
    reached inside the search bracket, found=False and no value is returned.

    Args:
        params (SolveTargetInput): Water profile plus target_ccpp_mg_L_CaCO3 and mode

    Returns:
        Dictionary with found, required_pH or required_calcium_mg_L_CaCO3,
        achieved_ccpp_mg_L_CaCO3, message and provenance.

    Example:
        result = await solve_target(SolveTargetInput(
            pH=7.8, temperature_C=20, tds_mg_L=200,
            calcium_mg_L_CaCO3=150, alkalinity_mg_L_CaCO3=120,
            target_ccpp_mg_L_CaCO3=5.0, mode="pH"
        ))
        print(result["required_pH"])
    """
    logger.info(f"Target CCPP {params.target_ccpp_mg_L_CaCO3} mg/L requested ({params.mode} mode)")

    return await anyio.to_thread.run_sync(
        lambda: solve_target_ccpp(
            target_ccpp_mg_L_CaCO3=params.target_ccpp_mg_L_CaCO3,
            mode=params.mode,
            **_profile_kwargs(params),
        )
    )


@mcp.tool(
    name="stability_sensitivity_sweep",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def sweep(params: SensitivitySweepInput) -> dict:
    """
    CCPP and LSI curves versus pH or calcium.

    Args:
        params (SensitivitySweepInput): Water profile plus variable and optional grid

    Returns:
        Dictionary with variable, operating_point, points [{x, ccpp, lsi}]
        and zero_crossing (x where CCPP = 0, if inside the grid).
    """
    return await anyio.to_thread.run_sync(
        lambda: sensitivity_sweep(
            variable=params.variable,
            start=params.start,
            stop=params.stop,
            step=params.step,
            **_profile_kwargs(params),
        )
    )


@mcp.tool(
    name="stability_expert_commentary",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=True,  # Requests text from the client LLM
    )
)
async def expert_commentary(params: WaterProfileInput, ctx: Context) -> dict:
    """
    Computed stability results plus expert commentary from the client LLM.

    Commentary is requested through MCP sampling. If the client does not
    support sampling or the request fails, a placeholder summary is returned
    and the computed results are unchanged.

    Args:
        params (WaterProfileInput): Water profile

    Returns:
        Dictionary with results (rounded engine output) and insight
        {available, summary, prompt}.
    """
    water = WaterParameters(
        pH=params.pH,
        temperature_C=params.temperature_C,
        tds_mg_L=params.tds_mg_L,
        calcium_mg_L_CaCO3=params.calcium_mg_L_CaCO3,
        alkalinity_mg_L_CaCO3=params.alkalinity_mg_L_CaCO3,
    )
    try:
        calibration = get_calibration_profile(params.calibration_profile)
    except KeyError as e:
        raise ValueError(str(e)) from e
    result = await anyio.to_thread.run_sync(lambda: evaluate(water, calibration))

    async def _sample_text(prompt: str) -> Optional[str]:
        response = await ctx.sample(prompt)
        return getattr(response, "text", None)

    insight = await summarize_water_profile_async(water, result, _sample_text)

    return {
        "results": format_result(result),
        "insight": insight,
    }


@mcp.tool(
    name="stability_list_calibration_profiles",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,
    )
)
async def list_calibration_profiles() -> dict:
    """
    List calibration profiles and their numeric constants.

    Returns:
        Dictionary {profiles: {name: {description, constants...}}}
    """
    profiles = load_calibration_profiles()
    return {
        "profiles": {
            name: profile.model_dump(mode="json")
            for name, profile in profiles.items()
        }
    }


# ============================================================================
# Server Information
# ============================================================================

@mcp.tool(
    name="stability_get_server_info",
    annotations=ToolAnnotations(
        readOnlyHint=True,
        openWorldHint=False,  # Returns static server info
    )
)
async def get_server_info() -> dict:
    """
    Get water stability MCP server information.

    Returns:
        Dictionary with server version, tool registry with metadata
    """
    tool_registry = [
        {
            "name": "stability_calculate_water_stability",
            "tier": "chemistry",
            "description": "LSI, saturation pH, CCPP and equilibrium state",
            "typical_latency_sec": 0.01,
        },
        {
            "name": "stability_solve_target_ccpp",
            "tier": "chemistry",
            "description": "Required pH or calcium for a target CCPP",
            "typical_latency_sec": 0.5,
        },
        {
            "name": "stability_sensitivity_sweep",
            "tier": "chemistry",
            "description": "CCPP/LSI curves versus pH or calcium",
            "typical_latency_sec": 0.5,
        },
        {
            "name": "stability_expert_commentary",
            "tier": "commentary",
            "description": "Stability results with client-LLM expert commentary",
            "typical_latency_sec": 5.0,
        },
        {
            "name": "stability_list_calibration_profiles",
            "tier": "metadata",
            "description": "Available calibration profiles",
            "typical_latency_sec": 0.001,
        },
        {
            "name": "stability_get_server_info",
            "tier": "metadata",
            "description": "Server information and tool registry",
            "typical_latency_sec": 0.001,
        },
    ]

    return {
        "name": "Water Stability MCP Server",
        "version": ENGINE_VERSION,
        "tool_count": len(tool_registry),
        "architecture": "Carbonate equilibrium engine → stability tools → MCP",
        "tool_registry": tool_registry,
        "units": {
            "calcium": "mg/L as CaCO3",
            "alkalinity": "mg/L as CaCO3",
            "ccpp": "mg/L as CaCO3 (positive = precipitation)",
        },
        "calibration_profiles": sorted(load_calibration_profiles()),
    }


# ============================================================================
# Run Server
# ============================================================================

if __name__ == "__main__":
    logger.info("=" * 70)
    logger.info("Water Stability MCP Server")
    logger.info("=" * 70)
    logger.info("Implemented Tools:")
    logger.info("  [Tier 1] stability_calculate_water_stability - LSI / CCPP / pHs")
    logger.info("  [Tier 1] stability_solve_target_ccpp - Required pH or calcium")
    logger.info("  [Tier 1] stability_sensitivity_sweep - CCPP/LSI curves")
    logger.info("  [Commentary] stability_expert_commentary - Client-LLM summary")
    logger.info("  [Info] stability_list_calibration_profiles, stability_get_server_info")
    logger.info("=" * 70)

    # Run the server
    mcp.run()
