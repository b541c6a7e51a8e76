# ============================================================================
# src/report_simplifier/validators/report_validator.py
# ============================================================================
"""
Final report shape check.

Runs on the serialized envelope just before it leaves the pipeline.
A failure here means an upstream stage broke its contract.
"""

from typing import Any, Dict

from ..constants.scoring import FINAL_SUMMARY_MIN_LENGTH
from ..core.enums import ReportStatus
from ..utils.exceptions import InternalInvariantError
from .structure import is_number

REQUIRED_FIELDS = ("tests", "summary", "status", "processing_metadata")


def validate_final_result(result: Dict[str, Any]) -> None:
    missing = [f for f in REQUIRED_FIELDS if f not in result]
    if missing:
        raise InternalInvariantError(f"Final result missing fields: {', '.join(missing)}")

    tests = result["tests"]
    if not isinstance(tests, list) or not tests:
        raise InternalInvariantError("Final result must contain a non-empty tests array")

    for index, test in enumerate(tests):
        if not isinstance(test, dict):
            raise InternalInvariantError(f"Test {index} is not an object")
        if not test.get("name") or not test.get("unit") or not test.get("status"):
            raise InternalInvariantError(f"Test {index} is missing name, unit or status")
        if not is_number(test.get("value")):
            raise InternalInvariantError(f"Test {index} has a non-numeric value")

    summary = result["summary"]
    if not isinstance(summary, str) or len(summary) < FINAL_SUMMARY_MIN_LENGTH:
        raise InternalInvariantError("Final summary is missing or too short")

    if "explanations" in result and not isinstance(result["explanations"], list):
        raise InternalInvariantError("Explanations must be an array")

    if result["status"] not in {s.value for s in ReportStatus}:
        raise InternalInvariantError(f"Invalid status: {result['status']}")
