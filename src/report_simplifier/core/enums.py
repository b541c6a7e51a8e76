# ============================================================================
# src/report_simplifier/core/enums.py
# ============================================================================
"""
Processing Enums
- Lab result status
- Report envelope status
- Pipeline steps
"""

from enum import Enum


class LabStatus(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"  # Beyond 30% outside the reference range


class ReportStatus(str, Enum):
    OK = "ok"
    UNPROCESSED = "unprocessed"
    ERROR = "error"


class PipelineStep(str, Enum):
    EXTRACTION = "extraction"
    NORMALIZATION = "normalization"
    SUMMARY = "summary"
    VALIDATION = "validation"
    UNKNOWN = "unknown"
