# ============================================================================
# src/report_simplifier/validators/structure.py
# ============================================================================
"""
Structural checks for normalized tests.

- build_normalized_test(): dict from a completion reply -> NormalizedTest
- validate_normalized_tests(): typed tests handed to the summary stage
"""

import math
from numbers import Real
from typing import Any, Dict, List, Sequence, Tuple

from ..core.enums import LabStatus
from ..core.models import NormalizedTest, ReferenceRange
from ..core.status import determine_status, parse_status, status_matches_value
from ..utils.exceptions import StructuralValidationError


def is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _require_text(entry: Dict[str, Any], field: str, index: int) -> str:
    value = entry.get(field)
    if not isinstance(value, str) or not value.strip():
        raise StructuralValidationError(f"Test {index}: missing or empty '{field}'")
    return value.strip()


def _build_range(raw_range: Any, index: int) -> ReferenceRange:
    if not isinstance(raw_range, dict):
        raise StructuralValidationError(f"Test {index}: missing 'ref_range'")
    low, high = raw_range.get("low"), raw_range.get("high")
    if not is_number(low) or not is_number(high):
        raise StructuralValidationError(f"Test {index}: ref_range low/high must be numbers")
    if low >= high:
        raise StructuralValidationError(
            f"Test {index}: ref_range low ({low}) must be below high ({high})"
        )
    return ReferenceRange(low=float(low), high=float(high))


def build_normalized_test(entry: Any, index: int) -> Tuple[NormalizedTest, List[str]]:
    """
    Validate one test dict and build a NormalizedTest.

    An unrecognized status is recomputed from value vs range. A recognized
    status that contradicts the value is also recomputed and reported in
    the returned notes.
    """
    if not isinstance(entry, dict):
        raise StructuralValidationError(f"Test {index}: expected an object")

    name = _require_text(entry, "name", index)
    unit = _require_text(entry, "unit", index)

    value = entry.get("value")
    if not is_number(value):
        raise StructuralValidationError(f"Test {index} ({name}): 'value' must be a number")
    value = float(value)

    if "status" not in entry or entry.get("status") in (None, ""):
        raise StructuralValidationError(f"Test {index} ({name}): missing 'status'")

    ref_range = _build_range(entry.get("ref_range"), index)
    notes: List[str] = []

    status = parse_status(entry.get("status"))
    computed = determine_status(value, ref_range)
    if status is None:
        status = computed
    elif not status_matches_value(status, value, ref_range):
        notes.append(
            f"{name}: reported status '{status.value}' does not match value, using '{computed.value}'"
        )
        status = computed

    return NormalizedTest(name=name, value=value, unit=unit, status=status, ref_range=ref_range), notes


def validate_normalized_tests(tests: Sequence[NormalizedTest]) -> None:
    """Same shape checks for already-typed tests; raises StructuralValidationError."""
    for index, test in enumerate(tests):
        if not isinstance(test, NormalizedTest):
            raise StructuralValidationError(f"Test {index}: expected NormalizedTest, got {type(test).__name__}")
        if not test.name or not test.name.strip():
            raise StructuralValidationError(f"Test {index}: missing name")
        if not test.unit or not test.unit.strip():
            raise StructuralValidationError(f"Test {index} ({test.name}): missing unit")
        if not is_number(test.value):
            raise StructuralValidationError(f"Test {index} ({test.name}): value must be a number")
        if not isinstance(test.status, LabStatus):
            raise StructuralValidationError(f"Test {index} ({test.name}): invalid status")
        if not (is_number(test.ref_range.low) and is_number(test.ref_range.high)):
            raise StructuralValidationError(f"Test {index} ({test.name}): ref_range must be numeric")
        if test.ref_range.low >= test.ref_range.high:
            raise StructuralValidationError(f"Test {index} ({test.name}): ref_range low must be below high")
