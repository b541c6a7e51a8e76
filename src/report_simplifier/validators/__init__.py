"""
Validators: structure, hallucination, range plausibility, language safety,
final report shape.
"""

from .hallucination import HALLUCINATION_REASON, HallucinationGuard
from .plausibility import ReferenceRangeChecker
from .report_validator import validate_final_result
from .safety import SafetyFilter
from .structure import build_normalized_test, validate_normalized_tests

__all__ = [
    "HALLUCINATION_REASON",
    "HallucinationGuard",
    "ReferenceRangeChecker",
    "validate_final_result",
    "SafetyFilter",
    "build_normalized_test",
    "validate_normalized_tests",
]
