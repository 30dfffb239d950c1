"""
Automated validation runner and reporting.

Runs every reference water through the stability engine and PHREEQC and
summarizes the LSI agreement.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass
from datetime import datetime
import json
import logging

from core.calibration import CalibrationProfile
from .phreeqc_crosscheck import PhreeqcCrossCheck
from .reference_waters import REFERENCE_WATERS, ReferenceWater

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """
    Validation report across the reference waters.

    Attributes:
        timestamp: When validation was run
        calibration_profile: Profile used by the engine
        tolerance_si: Accepted |LSI - SI(calcite)|
        pass_rate: Fraction of cases within tolerance
        details: Per-case results
        summary: Text summary of validation
    """
    timestamp: datetime
    calibration_profile: str
    tolerance_si: float
    pass_rate: float
    details: List[Dict[str, Any]]
    summary: str


def run_all_validations(
    tolerance_si: float = 0.25,
    calibration: Optional[CalibrationProfile] = None,
    waters: Optional[List[ReferenceWater]] = None,
) -> ValidationReport:
    """
    Compare engine LSI with PHREEQC calcite SI for every reference water.

    Args:
        tolerance_si: Acceptable absolute difference (SI units)
        calibration: Calibration profile for the engine
        waters: Reference waters (default: REFERENCE_WATERS)

    Returns:
        ValidationReport
    """
    logger.info("Starting PHREEQC cross-validation...")

    checker = PhreeqcCrossCheck(calibration=calibration)
    waters = waters if waters is not None else REFERENCE_WATERS

    details = []
    for water in waters:
        comparison = checker.compare(water.params)
        passed = abs(comparison.difference) <= tolerance_si
        details.append({
            "case_id": water.case_id,
            "engine_lsi": comparison.engine_lsi,
            "phreeqc_si_calcite": comparison.phreeqc_si_calcite,
            "difference": comparison.difference,
            "passed": passed,
        })
        if not passed:
            logger.warning(
                f"{water.case_id}: LSI {comparison.engine_lsi:.3f} vs "
                f"PHREEQC SI {comparison.phreeqc_si_calcite:.3f}"
            )

    n_passed = sum(1 for d in details if d["passed"])
    pass_rate = n_passed / len(details) if details else 0.0

    report = ValidationReport(
        timestamp=datetime.now(),
        calibration_profile=checker.calibration.name,
        tolerance_si=tolerance_si,
        pass_rate=pass_rate,
        details=details,
        summary=_generate_summary(details, pass_rate, tolerance_si),
    )

    logger.info(f"Validation complete. Pass rate: {pass_rate:.1%}")
    return report


def _generate_summary(details: List[Dict[str, Any]], pass_rate: float, tolerance_si: float) -> str:
    """Generate human-readable validation summary"""
    lines = [
        "=" * 70,
        "STABILITY ENGINE VALIDATION REPORT (vs PHREEQC)",
        "=" * 70,
        "",
        f"Tolerance: |LSI - SI(calcite)| <= {tolerance_si}",
        f"Pass Rate: {pass_rate:.1%}",
        "",
        "-" * 70,
    ]

    for d in details:
        status = "PASS" if d["passed"] else "FAIL"
        lines.append(
            f"{d['case_id']:<24} LSI {d['engine_lsi']:+.3f}  "
            f"SI {d['phreeqc_si_calcite']:+.3f}  diff {d['difference']:+.3f}  {status}"
        )

    lines.extend(["", "=" * 70])
    return "\n".join(lines)


def export_validation_report(report: ValidationReport, filepath: str):
    """Export validation report to JSON file"""
    data = {
        "timestamp": report.timestamp.isoformat(),
        "calibration_profile": report.calibration_profile,
        "tolerance_si": report.tolerance_si,
        "pass_rate": report.pass_rate,
        "details": report.details,
        "summary": report.summary,
    }

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)

    logger.info(f"Validation report exported to {filepath}")
