"""
Core data model and status rules.
"""

from .enums import LabStatus, PipelineStep, ReportStatus
from .models import (
    ExtractionResult,
    NormalizationResult,
    NormalizedTest,
    ProcessingMetadata,
    ReferenceRange,
    ReportResult,
    SummaryResult,
    TerminalResult,
)
from .status import determine_basic_status, determine_status

__all__ = [
    "LabStatus",
    "PipelineStep",
    "ReportStatus",
    "ExtractionResult",
    "NormalizationResult",
    "NormalizedTest",
    "ProcessingMetadata",
    "ReferenceRange",
    "ReportResult",
    "SummaryResult",
    "TerminalResult",
    "determine_basic_status",
    "determine_status",
]
