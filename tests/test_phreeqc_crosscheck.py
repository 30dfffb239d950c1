"""
Cross-validation tests: stability engine vs PHREEQC (validation/)

PHREEQC-dependent tests are skipped when phreeqpython is not installed
(pip install -e .[validation]).
"""

import json

import pytest
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.stability_engine import evaluate
from validation.reference_waters import REFERENCE_WATERS, get_reference_water


@pytest.fixture
def checker():
    pytest.importorskip("phreeqpython")
    from validation.phreeqc_crosscheck import PhreeqcCrossCheck
    return PhreeqcCrossCheck()


# ============================================================================
# Reference waters
# ============================================================================

class TestReferenceWaters:
    """Benchmark water set"""

    def test_unique_ids(self):
        ids = [w.case_id for w in REFERENCE_WATERS]
        assert len(ids) == len(set(ids))

    def test_lookup(self):
        water = get_reference_water("DISTRIBUTION_TYPICAL")
        assert water is not None
        assert water.params.pH == 7.8
        assert get_reference_water("MISSING") is None

    @pytest.mark.parametrize("water", REFERENCE_WATERS, ids=lambda w: w.case_id)
    def test_engine_evaluates_every_water(self, water):
        result = evaluate(water.params)
        assert -3.0 < result.lsi < 3.0

    def test_corrosive_water_is_undersaturated(self):
        assert evaluate(get_reference_water("SOFT_SURFACE").params).lsi < 0

    def test_hot_water_more_scaling_than_cold(self):
        hot = evaluate(get_reference_water("HOT_WATER").params)
        typical = evaluate(get_reference_water("DISTRIBUTION_TYPICAL").params)
        assert hot.lsi > typical.lsi > 0


# ============================================================================
# PHREEQC cross-check
# ============================================================================

class TestPhreeqcCrossCheck:
    """Engine LSI vs PHREEQC calcite SI"""

    def test_typical_water_agreement(self, checker):
        comparison = checker.compare(get_reference_water("DISTRIBUTION_TYPICAL").params)
        assert abs(comparison.difference) < 0.3

    def test_ionic_strength_comparable(self, checker):
        """Background NaCl brings PHREEQC ionic strength near the TDS estimate"""
        comparison = checker.compare(get_reference_water("DISTRIBUTION_TYPICAL").params)
        assert comparison.phreeqc_ionic_strength_M == pytest.approx(
            comparison.engine_ionic_strength_M, rel=0.3
        )

    def test_sign_agreement_for_corrosive_water(self, checker):
        comparison = checker.compare(get_reference_water("SOFT_SURFACE").params)
        assert comparison.engine_lsi < 0
        assert comparison.phreeqc_si_calcite < 0


class TestValidationRunner:
    """Report generation"""

    def test_run_all_validations(self):
        pytest.importorskip("phreeqpython")
        from validation.run_validation import run_all_validations

        report = run_all_validations(tolerance_si=0.5)

        assert len(report.details) == len(REFERENCE_WATERS)
        assert 0.0 <= report.pass_rate <= 1.0
        assert report.calibration_profile == "default"
        assert "VALIDATION REPORT" in report.summary

    def test_export_report(self, tmp_path):
        pytest.importorskip("phreeqpython")
        from validation.run_validation import export_validation_report, run_all_validations

        report = run_all_validations(waters=REFERENCE_WATERS[:1])
        output = tmp_path / "report.json"
        export_validation_report(report, str(output))

        data = json.loads(output.read_text())
        assert data["details"][0]["case_id"] == REFERENCE_WATERS[0].case_id
        assert "timestamp" in data
