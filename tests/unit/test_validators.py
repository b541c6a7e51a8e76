# ============================================================================
# FILE: tests/unit/test_validators.py
# ============================================================================
"""
Unit tests for structural validators and the final envelope check
"""

import copy

import pytest

from report_simplifier.core.enums import LabStatus
from report_simplifier.core.models import NormalizedTest, ReferenceRange
from report_simplifier.utils.exceptions import InternalInvariantError, StructuralValidationError
from report_simplifier.validators.report_validator import validate_final_result
from report_simplifier.validators.structure import (
    build_normalized_test,
    is_number,
    validate_normalized_tests,
)


@pytest.fixture
def final_result():
    return {
        "tests": [{
            "name": "Hemoglobin",
            "value": 10.2,
            "unit": "g/dL",
            "status": "low",
            "ref_range": {"low": 12.0, "high": 16.0},
        }],
        "summary": "Your lab report contains 1 test result (Hemoglobin).",
        "explanations": [],
        "status": "ok",
        "processing_metadata": {"processing_id": "abc"},
    }


# ============================================================================
# Structure
# ============================================================================

@pytest.mark.parametrize("value,expected", [
    (10, True),
    (10.2, True),
    (True, False),
    ("10.2", False),
    (None, False),
    (float("nan"), False),
    (float("inf"), False),
])
def test_is_number(value, expected):
    assert is_number(value) is expected


def test_build_normalized_test(hemoglobin_entry):
    test, notes = build_normalized_test(hemoglobin_entry, 0)

    assert test == NormalizedTest(
        name="Hemoglobin",
        value=10.2,
        unit="g/dL",
        status=LabStatus.LOW,
        ref_range=ReferenceRange(low=12.0, high=16.0),
    )
    assert notes == []


def test_integer_values_become_floats(wbc_entry):
    test, _ = build_normalized_test(wbc_entry, 0)

    assert test.value == 11200.0
    assert isinstance(test.value, float)


def test_status_is_case_insensitive(hemoglobin_entry):
    test, notes = build_normalized_test(dict(hemoglobin_entry, status="LOW"), 0)

    assert test.status == LabStatus.LOW
    assert notes == []


def test_critical_accepted_outside_range(hemoglobin_entry):
    test, notes = build_normalized_test(dict(hemoglobin_entry, status="critical"), 0)

    assert test.status == LabStatus.CRITICAL
    assert notes == []


def test_contradicting_status_noted(hemoglobin_entry):
    test, notes = build_normalized_test(dict(hemoglobin_entry, value=7.0, status="high"), 0)

    assert test.status == LabStatus.CRITICAL
    assert notes == ["Hemoglobin: reported status 'high' does not match value, using 'critical'"]


@pytest.mark.parametrize("entry,message", [
    ("not a dict", "expected an object"),
    ({"value": 1, "unit": "g/dL", "status": "low"}, "'name'"),
    ({"name": "Hemoglobin", "value": 1, "unit": " ", "status": "low"}, "'unit'"),
    ({"name": "Hemoglobin", "value": "1", "unit": "g/dL", "status": "low"}, "must be a number"),
    ({"name": "Hemoglobin", "value": 1, "unit": "g/dL"}, "missing 'status'"),
    ({"name": "Hemoglobin", "value": 1, "unit": "g/dL", "status": "low"}, "missing 'ref_range'"),
    (
        {"name": "Hemoglobin", "value": 1, "unit": "g/dL", "status": "low", "ref_range": {"low": "12", "high": 16}},
        "must be numbers",
    ),
    (
        {"name": "Hemoglobin", "value": 1, "unit": "g/dL", "status": "low", "ref_range": {"low": 12, "high": 12}},
        "must be below high",
    ),
])
def test_build_rejects_invalid_entries(entry, message):
    with pytest.raises(StructuralValidationError, match=message):
        build_normalized_test(entry, 3)


def test_validate_normalized_tests(abnormal_tests, make_test):
    validate_normalized_tests(abnormal_tests)

    with pytest.raises(StructuralValidationError):
        validate_normalized_tests([make_test(unit="")])
    with pytest.raises(StructuralValidationError):
        validate_normalized_tests([make_test(low=16.0, high=12.0)])
    with pytest.raises(StructuralValidationError):
        validate_normalized_tests([{"name": "Hemoglobin"}])


# ============================================================================
# Final envelope
# ============================================================================

def test_valid_final_result(final_result):
    validate_final_result(final_result)


@pytest.mark.parametrize("mutate", [
    lambda r: r.pop("summary"),
    lambda r: r.pop("processing_metadata"),
    lambda r: r.update(tests=[]),
    lambda r: r["tests"][0].pop("unit"),
    lambda r: r["tests"][0].update(value="10.2"),
    lambda r: r.update(summary="Too short"),
    lambda r: r.update(explanations="none"),
    lambda r: r.update(status="done"),
])
def test_invalid_final_result(final_result, mutate):
    broken = copy.deepcopy(final_result)
    mutate(broken)

    with pytest.raises(InternalInvariantError):
        validate_final_result(broken)
