# ============================================================================
# src/report_simplifier/summary/fallback_summary.py
# ============================================================================
"""
Template summary used when the completion capability is unavailable.

The summary names every test; explanations cover abnormal tests only,
each with a short education sentence when one is known.
"""

import logging
from typing import List, Optional, Sequence, Union

from ..constants.lab_tests import TEST_EDUCATION
from ..core.enums import LabStatus
from ..core.models import NormalizedTest, SummaryResult, TerminalResult, format_number

_STATUS_PHRASES = {
    LabStatus.LOW: "below the reference range",
    LabStatus.HIGH: "above the reference range",
    LabStatus.CRITICAL: "well outside the reference range",
}


def education_for(name: str) -> Optional[str]:
    lowered = name.lower()
    for fragment, text in TEST_EDUCATION.items():
        if fragment in lowered:
            return text
    return None


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class FallbackSummaryGenerator:

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def generate_summary(self, tests: Sequence[NormalizedTest]) -> Union[SummaryResult, TerminalResult]:
        if not tests:
            return TerminalResult.unprocessed("No test results available for summary")

        abnormal = [t for t in tests if t.is_abnormal]
        names = ", ".join(t.name for t in tests)

        summary = f"Your lab report contains {_plural(len(tests), 'test result')} ({names}). "
        if abnormal:
            verb = "shows" if len(abnormal) == 1 else "show"
            summary += f"{_plural(len(abnormal), 'test')} {verb} values outside normal ranges. "
        else:
            summary += "All values are within normal ranges. "
        summary += "Please discuss these results with your healthcare provider for proper interpretation."

        explanations = [self.explain(t) for t in abnormal]

        self.logger.info(f"Fallback summary generated for {len(tests)} tests ({len(abnormal)} abnormal)")
        return SummaryResult(summary=summary, explanations=tuple(explanations), used_fallback=True)

    def explain(self, test: NormalizedTest) -> str:
        text = (
            f"{test.name} is {format_number(test.value)} {test.unit}, which is {_STATUS_PHRASES[test.status]} "
            f"of {format_number(test.ref_range.low)}-{format_number(test.ref_range.high)} {test.unit}."
        )
        education = education_for(test.name)
        if education:
            text += f" {education}"
        return text
