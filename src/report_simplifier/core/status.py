# ============================================================================
# src/report_simplifier/core/status.py
# ============================================================================
"""
Status classification from value vs reference range.
"""

from typing import Optional

from ..constants.scoring import CRITICAL_HIGH_FACTOR, CRITICAL_LOW_FACTOR
from .enums import LabStatus
from .models import ReferenceRange


def determine_status(value: float, ref_range: ReferenceRange) -> LabStatus:
    """Four-tier status; more than 30% outside the range is critical."""
    if value < ref_range.low * CRITICAL_LOW_FACTOR:
        return LabStatus.CRITICAL
    if value < ref_range.low:
        return LabStatus.LOW
    if value > ref_range.high * CRITICAL_HIGH_FACTOR:
        return LabStatus.CRITICAL
    if value > ref_range.high:
        return LabStatus.HIGH
    return LabStatus.NORMAL


def determine_basic_status(value: float, ref_range: ReferenceRange) -> LabStatus:
    """Three-tier status used by the deterministic fallback (no critical tier)."""
    if ref_range.contains(value):
        return LabStatus.NORMAL
    return LabStatus.LOW if value < ref_range.low else LabStatus.HIGH


def parse_status(raw: object) -> Optional[LabStatus]:
    """Return the LabStatus for a declared status string, or None if unrecognized."""
    if not isinstance(raw, str):
        return None
    try:
        return LabStatus(raw.strip().lower())
    except ValueError:
        return None


def status_matches_value(status: LabStatus, value: float, ref_range: ReferenceRange) -> bool:
    """
    True when a declared status agrees with the direction of value vs range.
    Critical is accepted on either side of the range.
    """
    if ref_range.contains(value):
        return status == LabStatus.NORMAL
    if value < ref_range.low:
        return status in (LabStatus.LOW, LabStatus.CRITICAL)
    return status in (LabStatus.HIGH, LabStatus.CRITICAL)
