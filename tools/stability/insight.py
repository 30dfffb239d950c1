"""
Expert-commentary collaborator for stability results.

Builds a water-chemistry prompt from the inputs and the already-computed
results, and hands it to an injected text generator (a language model client
supplied by the host, or MCP sampling in server.py). The engine never depends
on this module; a failed or missing generator yields a placeholder message
and the chemistry results are left untouched.
"""

from typing import Any, Awaitable, Callable, Dict, Optional
import logging

from core.schemas import CalculationResult, WaterParameters

logger = logging.getLogger(__name__)


INSIGHT_UNAVAILABLE_MESSAGE = (
    "Expert commentary is currently unavailable. "
    "The calculated LSI and CCPP values above are unaffected."
)


def build_insight_prompt(params: WaterParameters, result: CalculationResult) -> str:
    """
    Prompt sent to the commentary generator.

    Only plain numeric fields of the inputs and results are included.
    """
    return (
        "As a water chemistry expert, analyze the following water profile and provide "
        "engineering recommendations.\n"
        "\n"
        "INPUTS:\n"
        f"- pH: {params.pH}\n"
        f"- Temperature: {params.temperature_C}°C\n"
        f"- TDS: {params.tds_mg_L} mg/L\n"
        f"- Calcium Hardness: {params.calcium_mg_L_CaCO3} mg/L as CaCO3\n"
        f"- Total Alkalinity: {params.alkalinity_mg_L_CaCO3} mg/L as CaCO3\n"
        "\n"
        "CALCULATED RESULTS:\n"
        f"- Langelier Saturation Index (LSI): {result.lsi:.2f}\n"
        f"- CCPP (Precipitation Potential): {result.ccpp_mg_L_CaCO3:.2f} mg/L as CaCO3\n"
        f"- Saturation pH: {result.saturation_pH:.2f}\n"
        f"- Saturation State: {result.saturation_condition.value}\n"
        "\n"
        "Explain the implications for plumbing (scaling vs. corrosion), health, and potential "
        "treatment strategies to stabilize this water. Keep the tone professional and technical."
    )


def _insight_response(prompt: str, summary: Optional[str]) -> Dict[str, Any]:
    if summary is None or not str(summary).strip():
        return {"available": False, "summary": INSIGHT_UNAVAILABLE_MESSAGE, "prompt": prompt}
    return {"available": True, "summary": str(summary).strip(), "prompt": prompt}


def summarize_water_profile(
    params: WaterParameters,
    result: CalculationResult,
    generate_function: Optional[Callable[[str], str]] = None,
) -> Dict[str, Any]:
    """
    Request expert commentary for a computed water profile.

    Args:
        params: Water parameters that produced the result
        result: Engine output
        generate_function: Function(prompt: str) -> str (injected by the host)

    Returns:
        {
            "available": bool,
            "summary": str,          # commentary or placeholder
            "prompt": str,
        }
    """
    prompt = build_insight_prompt(params, result)

    if generate_function is None:
        logger.info("No commentary generator configured - returning placeholder")
        return _insight_response(prompt, None)

    try:
        summary = generate_function(prompt)
    except Exception as e:
        logger.warning(f"Commentary generation failed: {e}")
        summary = None

    return _insight_response(prompt, summary)


async def summarize_water_profile_async(
    params: WaterParameters,
    result: CalculationResult,
    generate_function: Callable[[str], Awaitable[Optional[str]]],
) -> Dict[str, Any]:
    """Async variant of summarize_water_profile for awaitable generators."""
    prompt = build_insight_prompt(params, result)

    try:
        summary = await generate_function(prompt)
    except Exception as e:
        logger.warning(f"Commentary generation failed: {e}")
        summary = None

    return _insight_response(prompt, summary)
