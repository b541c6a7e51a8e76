# ============================================================================
# src/report_simplifier/validators/safety.py
# ============================================================================
"""
Patient Language Safety Filter

Generated explanations must educate, not diagnose or instruct.
- sanitize(): whitespace / non-printable cleanup and urgency phrase removal
- validate(): rejects directive phrases and unhedged diagnostic phrases,
  enforces summary length bounds, warns on softer issues
"""

import logging
import re
from typing import List, Optional, Sequence

from ..constants.safety_phrases import (
    DIAGNOSIS_TERMS,
    DIAGNOSTIC_PHRASES,
    DIRECTIVE_PHRASES,
    HEDGING_PHRASES,
    URGENCY_PHRASES,
)
from ..constants.scoring import SUMMARY_MAX_LENGTH, SUMMARY_MIN_LENGTH
from ..core.models import NormalizedTest
from ..utils.exceptions import SafetyViolation

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")


def _phrase_re(phrase: str) -> "re.Pattern":
    return re.compile(r"\b" + re.escape(phrase) + r"\b", re.IGNORECASE)


class SafetyFilter:

    def __init__(
        self,
        min_length: int = SUMMARY_MIN_LENGTH,
        max_length: int = SUMMARY_MAX_LENGTH,
    ):
        self.min_length = min_length
        self.max_length = max_length
        self._urgency = [_phrase_re(p) for p in URGENCY_PHRASES]
        self._directive = [(p, _phrase_re(p)) for p in DIRECTIVE_PHRASES]
        self._diagnostic = [(p, _phrase_re(p)) for p in DIAGNOSTIC_PHRASES]
        self._diagnosis_terms = [(p, _phrase_re(p)) for p in DIAGNOSIS_TERMS]

    def sanitize(self, text: str) -> str:
        if not text:
            return ""
        cleaned = "".join(ch if ch.isprintable() else " " for ch in text)
        for pattern in self._urgency:
            cleaned = pattern.sub("", cleaned)
        cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
        # Removing a phrase can leave " ." or " ,"
        return re.sub(r"\s+([.,;:!?])", r"\1", cleaned)

    def validate(
        self,
        summary: str,
        explanations: Sequence[str],
        tests: Optional[Sequence[NormalizedTest]] = None,
    ) -> None:
        """
        Raise SafetyViolation when the text is not safe to show a patient.
        """
        if len(summary) < self.min_length:
            raise SafetyViolation(f"Summary too short ({len(summary)} characters)")
        if len(summary) > self.max_length:
            raise SafetyViolation(f"Summary too long ({len(summary)} characters)")

        combined = " ".join([summary, *explanations])

        for phrase, pattern in self._directive:
            if pattern.search(combined):
                raise SafetyViolation(f"Prohibited phrase detected: '{phrase}'", phrase=phrase)

        sentences = self.split_sentences(combined)
        for phrase, pattern in self._diagnostic:
            for sentence in sentences:
                if self._unhedged(pattern, sentence):
                    raise SafetyViolation(f"Unhedged diagnostic phrase detected: '{phrase}'", phrase=phrase)

        for term, pattern in self._diagnosis_terms:
            if any(self._unhedged(pattern, s) for s in sentences):
                logger.warning(f"Diagnosis-adjacent term without hedging: '{term}'")

        if tests and any(t.is_abnormal for t in tests) and not explanations:
            logger.warning("Abnormal results present but no explanations were generated")

    @staticmethod
    def split_sentences(text: str) -> List[str]:
        return [s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]

    @staticmethod
    def is_hedged(prefix: str) -> bool:
        lowered = prefix.lower()
        return any(hedge in lowered for hedge in HEDGING_PHRASES)

    def _unhedged(self, pattern: "re.Pattern", sentence: str) -> bool:
        for match in pattern.finditer(sentence):
            if not self.is_hedged(sentence[:match.start()]):
                return True
        return False
