# ============================================================================
# src/report_simplifier/core/models.py
# ============================================================================
"""
Stage results and the final report envelope.

Every stage returns either its own frozen result or a TerminalResult
(unprocessed / error); the orchestrator stops at the first terminal one.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .enums import LabStatus, ReportStatus


@dataclass(frozen=True)
class ReferenceRange:
    low: float
    high: float

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high

    def to_dict(self) -> Dict[str, float]:
        return {"low": self.low, "high": self.high}


@dataclass(frozen=True)
class NormalizedTest:
    name: str
    value: float
    unit: str
    status: LabStatus
    ref_range: ReferenceRange

    @property
    def is_abnormal(self) -> bool:
        return self.status != LabStatus.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "unit": self.unit,
            "status": self.status.value,
            "ref_range": self.ref_range.to_dict(),
        }


@dataclass(frozen=True)
class ExtractionResult:
    tests_raw: Tuple[str, ...]
    confidence: float
    raw_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"tests_raw": list(self.tests_raw), "confidence": self.confidence}


@dataclass(frozen=True)
class NormalizationResult:
    tests: Tuple[NormalizedTest, ...]
    normalization_confidence: float
    processing_notes: Tuple[str, ...] = ()
    used_fallback: bool = False

    @property
    def status(self) -> ReportStatus:
        return ReportStatus.OK

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "tests": [t.to_dict() for t in self.tests],
            "normalization_confidence": self.normalization_confidence,
        }
        if self.processing_notes:
            data["processing_notes"] = list(self.processing_notes)
        return data


@dataclass(frozen=True)
class SummaryResult:
    summary: str
    explanations: Tuple[str, ...]
    used_fallback: bool = False

    @property
    def status(self) -> ReportStatus:
        return ReportStatus.OK

    def to_dict(self) -> Dict[str, Any]:
        return {"summary": self.summary, "explanations": list(self.explanations)}


@dataclass(frozen=True)
class TerminalResult:
    """Unprocessed or error outcome; carries a reason and optionally the failing step."""
    status: ReportStatus
    reason: str
    step: Optional[str] = None

    @classmethod
    def unprocessed(cls, reason: str, step: Optional[str] = None) -> "TerminalResult":
        return cls(ReportStatus.UNPROCESSED, reason, step)

    @classmethod
    def error(cls, reason: str, step: Optional[str] = None) -> "TerminalResult":
        return cls(ReportStatus.ERROR, reason, step)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value, "reason": self.reason}
        if self.step is not None:
            data["step"] = self.step
        return data


@dataclass(frozen=True)
class ProcessingMetadata:
    extraction_confidence: float
    normalization_confidence: float
    tests_processed: int
    processing_id: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "extraction_confidence": self.extraction_confidence,
            "normalization_confidence": self.normalization_confidence,
            "tests_processed": self.tests_processed,
            "processing_id": self.processing_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ReportResult:
    tests: Tuple[NormalizedTest, ...]
    summary: str
    explanations: Tuple[str, ...]
    processing_metadata: ProcessingMetadata
    status: ReportStatus = ReportStatus.OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tests": [t.to_dict() for t in self.tests],
            "summary": self.summary,
            "explanations": list(self.explanations),
            "status": self.status.value,
            "processing_metadata": self.processing_metadata.to_dict(),
        }


def format_number(value: float) -> str:
    """11200.0 -> '11200', 10.2 -> '10.2'"""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.10g}"
