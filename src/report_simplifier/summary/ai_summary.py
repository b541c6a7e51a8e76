# ============================================================================
# src/report_simplifier/summary/ai_summary.py
# ============================================================================
"""
Summary Generator

Normalized tests -> patient-friendly summary and explanations through
the completion capability, gated by the SafetyFilter.

- invalid input -> StructuralValidationError / InputError (hard failure)
- completion unavailable -> FallbackSummaryGenerator
- malformed reply -> TerminalResult(unprocessed)
- unsafe text -> regenerate (SAFETY_RETRY_ATTEMPTS times), then unprocessed
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

from .fallback_summary import FallbackSummaryGenerator
from ..completion.base import BaseCompletionClient
from ..completion.json_parsing import extract_json_object
from ..completion.retry import complete_with_retry
from ..config.completion_config import CompletionSettings, completion_settings
from ..config.pipeline_config import PipelineSettings, pipeline_settings
from ..core.models import NormalizedTest, SummaryResult, TerminalResult
from ..prompts import SUMMARY_SYSTEM_PROMPT, build_summary_user_prompt
from ..utils.exceptions import (
    CapabilityUnavailable,
    InputError,
    SafetyViolation,
    StructuralValidationError,
)
from ..validators.safety import SafetyFilter
from ..validators.structure import validate_normalized_tests

UNSAFE_SUMMARY_REASON = "Unable to generate safe patient explanation"


class SummaryGenerator:

    def __init__(
        self,
        client: BaseCompletionClient,
        fallback: Optional[FallbackSummaryGenerator] = None,
        safety_filter: Optional[SafetyFilter] = None,
        settings: Optional[PipelineSettings] = None,
        completion_config: Optional[CompletionSettings] = None,
    ):
        self.client = client
        self.fallback = fallback or FallbackSummaryGenerator()
        self.safety_filter = safety_filter or SafetyFilter()
        self.settings = settings or pipeline_settings
        self.completion_config = completion_config or completion_settings
        self.logger = logging.getLogger(self.__class__.__name__)

    async def generate_summary(
        self, tests: Sequence[NormalizedTest]
    ) -> Union[SummaryResult, TerminalResult]:
        if not tests:
            raise InputError("No test results provided for summary generation")
        validate_normalized_tests(tests)

        user_prompt = build_summary_user_prompt(tests)
        attempts = 1 + self.settings.SAFETY_RETRY_ATTEMPTS

        for attempt in range(1, attempts + 1):
            try:
                reply = await complete_with_retry(
                    self.client,
                    SUMMARY_SYSTEM_PROMPT,
                    user_prompt,
                    max_tokens=self.completion_config.SUMMARY_MAX_TOKENS,
                    temperature=self.completion_config.SUMMARY_TEMPERATURE,
                    max_attempts=self.completion_config.COMPLETION_MAX_ATTEMPTS,
                    base_delay=self.completion_config.COMPLETION_RETRY_BASE_DELAY,
                    operation="summary",
                )
            except CapabilityUnavailable as e:
                self.logger.warning(f"AI summary unavailable ({e}), using template summary")
                return self.fallback.generate_summary(tests)

            try:
                summary, explanations = self.parse_summary_response(reply)
            except StructuralValidationError as e:
                self.logger.error(f"Summary reply rejected: {e}")
                return TerminalResult.unprocessed(f"Unable to parse patient explanation: {e}")

            try:
                self.safety_filter.validate(summary, explanations, tests)
            except SafetyViolation as e:
                self.logger.warning(f"Safety check failed (attempt {attempt}/{attempts}): {e}")
                continue

            self.logger.info(f"Summary generated with {len(explanations)} explanations")
            return SummaryResult(summary=summary, explanations=tuple(explanations))

        self.logger.error("No safe summary after all attempts")
        return TerminalResult.unprocessed(UNSAFE_SUMMARY_REASON)

    def parse_summary_response(self, reply: str) -> Tuple[str, List[str]]:
        payload = extract_json_object(reply)
        if payload is None:
            raise StructuralValidationError("no JSON object found")

        summary = payload.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            raise StructuralValidationError("missing 'summary'")

        raw_explanations: Any = payload.get("explanations", [])
        if raw_explanations is None:
            raw_explanations = []
        if not isinstance(raw_explanations, list):
            raise StructuralValidationError("'explanations' must be an array")

        sanitize = self.safety_filter.sanitize
        explanations = [sanitize(str(e)) for e in raw_explanations]
        return sanitize(summary), [e for e in explanations if e]
