# ============================================================================
# src/report_simplifier/core/orchestrator.py
# ============================================================================
"""
Report Pipeline

This is the MAIN entry point for report processing.

Flow:
1. Extract raw test candidates from text or image
2. Normalize candidates (AI, else deterministic fallback)
3. Pause briefly to ease rate limits on the completion backend
4. Generate the patient summary (AI, else template)
5. Validate the final envelope

Each stage may stop the run with an unprocessed / error TerminalResult.
Services are injected; the pipeline keeps no state between runs.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Union

from .enums import PipelineStep
from .models import (
    ExtractionResult,
    NormalizationResult,
    ProcessingMetadata,
    ReportResult,
    SummaryResult,
    TerminalResult,
)
from ..completion.base import BaseCompletionClient
from ..completion.client import create_client
from ..config.pipeline_config import PipelineSettings, pipeline_settings
from ..extractors.text_extractor import TextExtractor
from ..normalizers.ai_normalizer import AINormalizer
from ..summary.ai_summary import SummaryGenerator
from ..utils.exceptions import HallucinationError, InputError
from ..utils.logging import ProcessingLogAdapter
from ..validators.hallucination import HALLUCINATION_REASON
from ..validators.report_validator import validate_final_result

SERVICE_NAME = "medical-report-simplifier"
SERVICE_VERSION = "1.0.0"
SUPPORTED_IMAGE_TYPES = ["jpg", "jpeg", "png", "gif", "bmp", "tiff"]

PROCESSING_STEPS = {
    PipelineStep.EXTRACTION.value: "Extract raw test candidates from text or image",
    PipelineStep.NORMALIZATION.value: "Normalize tests into name, value, unit, status and range",
    PipelineStep.SUMMARY.value: "Generate a patient-friendly summary",
    "final": "Validate and assemble the report",
}

NO_TEST_DATA_REASON = "No medical test data found in input"
NO_NORMALIZED_TESTS_REASON = "No medical tests could be normalized from input"

logger = logging.getLogger(__name__)


class ReportPipeline:
    """
    Sequences extraction -> normalization -> summary -> final validation.

    Usage:
        pipeline = ReportPipeline()
        result = await pipeline.process_report(text="Hemoglobin 10.2 g/dL (Low)")
        print(result.to_dict())
    """

    def __init__(
        self,
        text_extractor: Optional[TextExtractor] = None,
        normalizer: Optional[AINormalizer] = None,
        summary_generator: Optional[SummaryGenerator] = None,
        completion_client: Optional[BaseCompletionClient] = None,
        settings: Optional[PipelineSettings] = None,
    ):
        self.settings = settings or pipeline_settings
        self.client = completion_client or create_client()
        self.text_extractor = text_extractor or TextExtractor(settings=self.settings)
        self.normalizer = normalizer or AINormalizer(self.client, settings=self.settings)
        self.summary_generator = summary_generator or SummaryGenerator(self.client, settings=self.settings)

        logger.info(
            f"Report pipeline initialized (completion backend: {self.client.backend_type.value})"
        )

    async def process_report(
        self,
        text: Optional[str] = None,
        image_bytes: Optional[bytes] = None,
    ) -> Union[ReportResult, TerminalResult]:
        """
        Main entry point for report processing.

        Args:
            text: Typed or pasted report text
            image_bytes: Photographed / scanned report; takes precedence over text

        Returns:
            ReportResult with status "ok", or a TerminalResult with status
            "unprocessed" / "error" and a reason

        Raises:
            InputError: neither text nor image was supplied

        Example:
            result = await pipeline.process_report(
                text="Hemoglobin 10.2 g/dL (Low), WBC 11200 /uL (High)"
            )
        """
        if not image_bytes and (text is None or not text.strip()):
            raise InputError("Either text or image content is required")

        processing_id = str(uuid.uuid4())
        log = ProcessingLogAdapter(logger, {"processing_id": processing_id})
        log.info(f"Processing {'image' if image_bytes else 'text'} report")

        try:
            # Step 1: Extraction
            extraction = await self._extract(text, image_bytes)
            log.debug(f"Extracted text: {extraction.raw_text!r}")
            if not extraction.tests_raw:
                log.warning("No test candidates found")
                return TerminalResult.unprocessed(NO_TEST_DATA_REASON, step=PipelineStep.EXTRACTION.value)
            log.info(
                f"Step 1 complete: {len(extraction.tests_raw)} candidates, "
                f"confidence {extraction.confidence:.2f}"
            )

            # Step 2: Normalization
            normalization = await self.normalizer.normalize_tests(
                list(extraction.tests_raw), extraction.confidence
            )
            if isinstance(normalization, TerminalResult):
                log.warning(f"Normalization stopped processing: {normalization.reason}")
                return normalization
            if not normalization.tests:
                log.warning("Normalization produced no tests")
                return TerminalResult.unprocessed(
                    NO_NORMALIZED_TESTS_REASON, step=PipelineStep.NORMALIZATION.value
                )
            log.info(
                f"Step 2 complete: {len(normalization.tests)} tests, "
                f"confidence {normalization.normalization_confidence:.2f}"
                f"{' (fallback)' if normalization.used_fallback else ''}"
            )

            await asyncio.sleep(self.settings.INTER_STAGE_DELAY_SECONDS)

            # Step 3: Summary
            summary = await self.summary_generator.generate_summary(list(normalization.tests))
            if isinstance(summary, TerminalResult):
                log.warning(f"Summary stopped processing: {summary.reason}")
                return summary
            log.info(f"Step 3 complete{' (template)' if summary.used_fallback else ''}")

            # Step 4: Final
            result = self._assemble(extraction, normalization, summary, processing_id)
            validate_final_result(result.to_dict())
            log.info("Report processed successfully")
            return result

        except HallucinationError as e:
            log.error(f"Hallucination detected: {e}")
            return TerminalResult.unprocessed(HALLUCINATION_REASON, step=PipelineStep.VALIDATION.value)
        except Exception as e:
            log.error(f"Report processing failed: {e}", exc_info=True)
            return TerminalResult.error(str(e) or type(e).__name__, step=PipelineStep.UNKNOWN.value)

    async def _extract(self, text: Optional[str], image_bytes: Optional[bytes]) -> ExtractionResult:
        if image_bytes:
            return await self.text_extractor.extract_from_image(image_bytes)
        return self.text_extractor.extract_from_text(text)

    def _assemble(
        self,
        extraction: ExtractionResult,
        normalization: NormalizationResult,
        summary: SummaryResult,
        processing_id: str,
    ) -> ReportResult:
        metadata = ProcessingMetadata(
            extraction_confidence=extraction.confidence,
            normalization_confidence=normalization.normalization_confidence,
            tests_processed=len(normalization.tests),
            processing_id=processing_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        return ReportResult(
            tests=normalization.tests,
            summary=summary.summary,
            explanations=summary.explanations,
            processing_metadata=metadata,
        )

    async def process_step_by_step(
        self,
        tests_raw: Sequence[str],
        confidence: float = 0.8,
    ) -> Dict[str, Any]:
        """
        Run normalization and summary on given candidates and return every
        intermediate stage. Stops filling steps at the first terminal result.
        """
        results: Dict[str, Any] = {
            "step1_extraction": {"tests_raw": list(tests_raw), "confidence": confidence},
            "step2_normalization": None,
            "step3_summary": None,
            "step4_final": None,
        }

        normalization = await self.normalizer.normalize_tests(list(tests_raw), confidence)
        results["step2_normalization"] = normalization.to_dict()
        if isinstance(normalization, TerminalResult) or not normalization.tests:
            return results

        summary = await self.summary_generator.generate_summary(list(normalization.tests))
        results["step3_summary"] = summary.to_dict()
        if isinstance(summary, TerminalResult):
            return results

        results["step4_final"] = {
            "tests": [t.to_dict() for t in normalization.tests],
            "summary": summary.summary,
            "explanations": list(summary.explanations),
            "status": "ok",
        }
        return results

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "supported_formats": ["text", "image"],
            "supported_file_types": SUPPORTED_IMAGE_TYPES,
            "processing_steps": PROCESSING_STEPS,
            "confidence_thresholds": {
                "ocr": self.settings.OCR_CONFIDENCE_THRESHOLD,
                "normalization": self.settings.NORMALIZATION_CONFIDENCE_THRESHOLD,
            },
            "completion": self.client.get_statistics(),
        }

    async def health_check(self) -> Dict[str, Any]:
        return await self.client.health_check()

    async def close(self) -> None:
        await self.client.close()
