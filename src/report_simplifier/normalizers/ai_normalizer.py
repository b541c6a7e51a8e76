# ============================================================================
# src/report_simplifier/normalizers/ai_normalizer.py
# ============================================================================
"""
AI Normalizer

Raw candidates -> structured tests through the completion capability.

Flow:
1. Prompt the model with the canonical vocabulary and the raw candidates
2. Parse the first JSON object in the reply
3. Per-test structure checks; status recomputed when missing or inconsistent
4. Hallucination guard against the raw candidates
5. Range plausibility (logged only) and confidence scoring

Outcomes:
- completion unavailable -> deterministic FallbackNormalizer
- hallucination / malformed reply -> TerminalResult(unprocessed)
- auth or bad request -> CompletionRequestError propagates
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .fallback_normalizer import FallbackNormalizer
from ..completion.base import BaseCompletionClient
from ..completion.json_parsing import extract_json_object
from ..completion.retry import complete_with_retry
from ..config.completion_config import CompletionSettings, completion_settings
from ..config.pipeline_config import PipelineSettings, pipeline_settings
from ..constants import scoring
from ..core.models import NormalizationResult, NormalizedTest, TerminalResult
from ..prompts import build_normalization_system_prompt, build_normalization_user_prompt
from ..utils.exceptions import (
    CapabilityUnavailable,
    HallucinationError,
    InputError,
    StructuralValidationError,
)
from ..validators.hallucination import HallucinationGuard
from ..validators.plausibility import ReferenceRangeChecker
from ..validators.structure import build_normalized_test


class AINormalizer:

    def __init__(
        self,
        client: BaseCompletionClient,
        fallback: Optional[FallbackNormalizer] = None,
        guard: Optional[HallucinationGuard] = None,
        range_checker: Optional[ReferenceRangeChecker] = None,
        settings: Optional[PipelineSettings] = None,
        completion_config: Optional[CompletionSettings] = None,
    ):
        self.client = client
        self.fallback = fallback or FallbackNormalizer()
        self.guard = guard or HallucinationGuard()
        self.range_checker = range_checker or ReferenceRangeChecker()
        self.settings = settings or pipeline_settings
        self.completion_config = completion_config or completion_settings
        self.logger = logging.getLogger(self.__class__.__name__)

    async def normalize_tests(
        self,
        tests_raw: Sequence[str],
        input_confidence: float = 0.8,
    ) -> Union[NormalizationResult, TerminalResult]:
        """
        Normalize raw candidates.

        Args:
            tests_raw: Raw candidate strings from extraction
            input_confidence: Extraction confidence, 0-1

        Returns:
            NormalizationResult, or TerminalResult(unprocessed) when the
            reply is malformed or not traceable to the input
        """
        if not tests_raw:
            raise InputError("No test results provided for normalization")

        try:
            reply = await complete_with_retry(
                self.client,
                build_normalization_system_prompt(),
                build_normalization_user_prompt(tests_raw),
                max_tokens=self.completion_config.NORMALIZATION_MAX_TOKENS,
                temperature=self.completion_config.NORMALIZATION_TEMPERATURE,
                max_attempts=self.completion_config.COMPLETION_MAX_ATTEMPTS,
                base_delay=self.completion_config.COMPLETION_RETRY_BASE_DELAY,
                operation="normalization",
            )
        except CapabilityUnavailable as e:
            self.logger.warning(f"AI normalization unavailable ({e}), using deterministic fallback")
            return self.fallback.normalize_tests(tests_raw, input_confidence)

        try:
            payload = self.parse_normalization_response(reply)
            tests, notes = self.build_tests(payload)
            self.guard.check(tests, tests_raw)
        except (HallucinationError, StructuralValidationError) as e:
            self.logger.error(f"Normalization rejected: {e}")
            return TerminalResult.unprocessed(str(e))

        confidence = self.calculate_confidence(tests, tests_raw, input_confidence, notes)
        if confidence < self.settings.NORMALIZATION_CONFIDENCE_THRESHOLD:
            self.logger.warning(
                f"Low normalization confidence {confidence:.2f} "
                f"(threshold {self.settings.NORMALIZATION_CONFIDENCE_THRESHOLD:.2f})"
            )

        self.logger.info(f"Normalized {len(tests)}/{len(tests_raw)} candidates (confidence {confidence:.2f})")
        return NormalizationResult(
            tests=tuple(tests),
            normalization_confidence=confidence,
            processing_notes=tuple(notes),
        )

    def parse_normalization_response(self, reply: str) -> Dict[str, Any]:
        payload = extract_json_object(reply)
        if payload is None:
            raise StructuralValidationError("Invalid AI response format: no JSON object found")
        if not isinstance(payload.get("tests"), list):
            raise StructuralValidationError("Invalid AI response format: missing 'tests' array")
        return payload

    def build_tests(self, payload: Dict[str, Any]) -> Tuple[List[NormalizedTest], List[str]]:
        notes = self._coerce_notes(payload.get("notes"))
        tests: List[NormalizedTest] = []
        for index, entry in enumerate(payload["tests"]):
            test, test_notes = build_normalized_test(entry, index)
            tests.append(test)
            notes.extend(test_notes)
        return tests, notes

    @staticmethod
    def _coerce_notes(raw_notes: Any) -> List[str]:
        if isinstance(raw_notes, str):
            return [raw_notes] if raw_notes.strip() else []
        if isinstance(raw_notes, list):
            return [str(n) for n in raw_notes if str(n).strip()]
        return []

    def calculate_confidence(
        self,
        tests: Sequence[NormalizedTest],
        tests_raw: Sequence[str],
        input_confidence: float,
        notes: Sequence[str],
    ) -> float:
        confidence = input_confidence * scoring.INPUT_CONFIDENCE_WEIGHT

        coverage = len(tests) / len(tests_raw) if tests_raw else 0.0
        confidence += min(coverage * scoring.COVERAGE_WEIGHT, scoring.COVERAGE_WEIGHT)

        if tests:
            quality = sum(self.range_checker.quality_score(t) for t in tests)
            confidence += min(quality / (2 * len(tests)) * scoring.QUALITY_WEIGHT, scoring.QUALITY_WEIGHT)

        if notes:
            confidence -= scoring.NOTES_PENALTY

        return round(min(max(confidence, 0.0), 1.0), 2)
