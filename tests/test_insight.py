"""
Tests for the expert-commentary collaborator (tools/stability/insight.py)

The commentary generator is injected; failures must never affect the
numeric results.
"""

import pytest
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.schemas import WaterParameters
from core.stability_engine import evaluate
from tools.stability.insight import (
    INSIGHT_UNAVAILABLE_MESSAGE,
    build_insight_prompt,
    summarize_water_profile,
    summarize_water_profile_async,
)


@pytest.fixture
def water():
    return WaterParameters(
        pH=7.8,
        temperature_C=20.0,
        tds_mg_L=200.0,
        calcium_mg_L_CaCO3=150.0,
        alkalinity_mg_L_CaCO3=120.0,
    )


@pytest.fixture
def result(water):
    return evaluate(water)


class TestPrompt:
    """Prompt content"""

    def test_contains_inputs_and_results(self, water, result):
        prompt = build_insight_prompt(water, result)

        assert "pH: 7.8" in prompt
        assert "Temperature: 20.0°C" in prompt
        assert "Calcium Hardness: 150.0 mg/L as CaCO3" in prompt
        assert f"(LSI): {result.lsi:.2f}" in prompt
        assert f"Saturation pH: {result.saturation_pH:.2f}" in prompt
        assert result.saturation_condition.value in prompt


class TestSummarize:
    """Synchronous generator injection"""

    def test_generator_success(self, water, result):
        calls = []

        def generate(prompt):
            calls.append(prompt)
            return "  Mildly scaling water; consider CO2 dosing.  "

        insight = summarize_water_profile(water, result, generate)

        assert insight["available"] is True
        assert insight["summary"] == "Mildly scaling water; consider CO2 dosing."
        assert calls == [insight["prompt"]]

    def test_no_generator(self, water, result):
        insight = summarize_water_profile(water, result)

        assert insight["available"] is False
        assert insight["summary"] == INSIGHT_UNAVAILABLE_MESSAGE

    def test_generator_failure(self, water, result):
        def generate(prompt):
            raise ConnectionError("model endpoint unreachable")

        insight = summarize_water_profile(water, result, generate)

        assert insight["available"] is False
        assert insight["summary"] == INSIGHT_UNAVAILABLE_MESSAGE

    def test_empty_response(self, water, result):
        insight = summarize_water_profile(water, result, lambda prompt: "   ")
        assert insight["available"] is False

    def test_results_untouched_by_failure(self, water, result):
        before = result.model_dump()
        summarize_water_profile(water, result, lambda prompt: 1 / 0)
        assert result.model_dump() == before


class TestSummarizeAsync:
    """Awaitable generator injection"""

    @pytest.mark.asyncio
    async def test_async_success(self, water, result):
        async def generate(prompt):
            return "Balanced water."

        insight = await summarize_water_profile_async(water, result, generate)
        assert insight["available"] is True
        assert insight["summary"] == "Balanced water."

    @pytest.mark.asyncio
    async def test_async_failure(self, water, result):
        async def generate(prompt):
            raise TimeoutError("sampling timed out")

        insight = await summarize_water_profile_async(water, result, generate)
        assert insight["available"] is False
        assert insight["summary"] == INSIGHT_UNAVAILABLE_MESSAGE
