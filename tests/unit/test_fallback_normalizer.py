# ============================================================================
# FILE: tests/unit/test_fallback_normalizer.py
# ============================================================================
"""
Unit tests for the deterministic fallback normalizer
"""

import pytest

from report_simplifier.core.enums import LabStatus
from report_simplifier.normalizers.fallback_normalizer import (
    FALLBACK_NOTE,
    FallbackNormalizer,
    normalize_unit_key,
)


@pytest.fixture
def normalizer():
    return FallbackNormalizer()


def test_scenario_candidates(normalizer):
    """Test the typed report candidates parse with fallback ranges"""
    result = normalizer.normalize_tests(["Hemoglobin 10.2 g/dL (Low)", "WBC 11200 /μL (High)"], 0.8)

    hemoglobin, wbc = result.tests
    assert (hemoglobin.name, hemoglobin.value, hemoglobin.unit) == ("Hemoglobin", 10.2, "g/dL")
    assert (hemoglobin.ref_range.low, hemoglobin.ref_range.high) == (12.0, 16.0)
    assert hemoglobin.status == LabStatus.LOW
    assert (wbc.ref_range.low, wbc.ref_range.high) == (4000.0, 11000.0)
    assert wbc.status == LabStatus.HIGH

    assert result.used_fallback is True
    assert result.processing_notes == (FALLBACK_NOTE,)


@pytest.mark.parametrize("input_confidence,expected", [
    (0.8, 0.4),
    (1.0, 0.5),
    (0.4, 0.3),   # floor
    (0.0, 0.3),
])
def test_confidence(normalizer, input_confidence, expected):
    result = normalizer.normalize_tests(["Glucose 95 mg/dL"], input_confidence)
    assert result.normalization_confidence == pytest.approx(expected)


def test_colon_form(normalizer):
    """Test 'Name: Value Unit'"""
    test = normalizer.parse_basic_test("Glucose: 95 mg/dL")

    assert test.name == "Glucose"
    assert test.value == 95.0
    assert (test.ref_range.low, test.ref_range.high) == (70.0, 100.0)
    assert test.status == LabStatus.NORMAL


def test_thousands_separator(normalizer):
    test = normalizer.parse_basic_test("WBC 7,500 /uL")

    assert test.value == 7500.0
    assert test.status == LabStatus.NORMAL


@pytest.mark.parametrize("raw,expected_range", [
    ("Sodium 140 mg/dL", (70.0, 140.0)),
    ("Albumin 4.1 g/dL", (10.0, 18.0)),
    ("Neutrophils 5000 /μL", (3000.0, 12000.0)),
    ("TSH 2.1 mIU/L", (0.0, 1000.0)),
])
def test_unit_family_ranges(normalizer, raw, expected_range):
    """Test range lookup falls back by unit family, then to a wide default"""
    test = normalizer.parse_basic_test(raw)
    assert (test.ref_range.low, test.ref_range.high) == expected_range


def test_no_critical_tier(normalizer):
    """Test far-out values are only low / high in the fallback"""
    test = normalizer.parse_basic_test("Hemoglobin 5.0 g/dL")
    assert test.status == LabStatus.LOW


def test_unparseable_candidates_dropped(normalizer):
    result = normalizer.normalize_tests(["Hemoglobin is high", "Glucose 95 mg/dL"], 0.8)

    assert [t.name for t in result.tests] == ["Glucose"]
    assert result.normalization_confidence == pytest.approx(0.4)


@pytest.mark.parametrize("unit,expected", [
    ("g/dL", "g/dl"),
    ("/μL", "ul"),
    ("/µL", "ul"),
    ("/uL", "ul"),
])
def test_normalize_unit_key(unit, expected):
    assert normalize_unit_key(unit) == expected
