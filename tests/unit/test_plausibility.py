# ============================================================================
# FILE: tests/unit/test_plausibility.py
# ============================================================================
"""
Unit tests for reference range plausibility checker
"""

import logging

import pytest

from report_simplifier.validators.plausibility import ReferenceRangeChecker


def test_checker_init():
    """Test checker loads the standard ranges"""
    checker = ReferenceRangeChecker()
    assert "Hemoglobin" in checker.ranges


def test_standard_hemoglobin_range_passes(make_test):
    """Test a textbook hemoglobin range"""
    checker = ReferenceRangeChecker()
    is_plausible, reason = checker.check(make_test())

    assert is_plausible is True
    assert reason is None


def test_wide_hemoglobin_range_fails(make_test, caplog):
    """Test {1, 100} is far below the expected low bound"""
    checker = ReferenceRangeChecker()
    with caplog.at_level(logging.WARNING):
        is_plausible, reason = checker.check(make_test(low=1.0, high=100.0))

    assert is_plausible is False
    assert "far from expected" in reason
    assert "Hemoglobin" in caplog.text


def test_high_bound_over_tolerance_fails(make_test):
    """Test the upper bound may be at most 1.5x the standard high"""
    checker = ReferenceRangeChecker()

    assert checker.check(make_test(low=12.0, high=27.0))[0] is True
    assert checker.check(make_test(low=12.0, high=27.5))[0] is False


def test_unknown_test_passes(make_test):
    """Test names without a standard range are assumed plausible"""
    checker = ReferenceRangeChecker()
    is_plausible, reason = checker.check(make_test(name="Ferritin", unit="ng/mL", low=1.0, high=5000.0))

    assert is_plausible is True
    assert reason is None


def test_unknown_unit_passes(make_test):
    checker = ReferenceRangeChecker()
    assert checker.check(make_test(unit="g/L", low=120.0, high=160.0))[0] is True


def test_custom_ranges(make_test):
    checker = ReferenceRangeChecker({"Hemoglobin": {"g/dL": (13.0, 17.0)}})
    assert checker.check(make_test(low=6.0, high=16.0))[0] is False


@pytest.mark.parametrize("value,low,high,expected", [
    (10.2, 12.0, 16.0, 2),     # plausible range, sane value
    (10.2, 1.0, 100.0, 1),     # implausible range
    (500.0, 12.0, 16.0, 1),    # value over 10x the ceiling
    (0.0, 12.0, 16.0, 1),      # non-positive value
])
def test_quality_score(make_test, value, low, high, expected):
    """Test quality points for range and value sanity"""
    checker = ReferenceRangeChecker()
    assert checker.quality_score(make_test(value=value, low=low, high=high)) == expected
