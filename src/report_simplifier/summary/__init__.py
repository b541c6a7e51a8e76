"""
Summary stage: normalized tests -> patient-friendly explanation.
"""

from .ai_summary import UNSAFE_SUMMARY_REASON, SummaryGenerator
from .fallback_summary import FallbackSummaryGenerator

__all__ = ["SummaryGenerator", "FallbackSummaryGenerator", "UNSAFE_SUMMARY_REASON"]
