# ============================================================================
# src/report_simplifier/extractors/text_extractor.py
# ============================================================================
"""
Text Extraction Stage

Turns a typed report or an uploaded image into raw test candidates:
- text cleanup and OCR misspelling fixes
- pattern-based candidate detection, line fallback when nothing matches
- heuristic confidence in [0, 1]

Image uploads go through the OCR engine first; the OCR confidence then
replaces the text heuristic.
"""

import logging
import re
from typing import List, Optional

from .candidates import CandidateExtractor, RegexCandidateExtractor
from .ocr_extractor import OCREngine, create_ocr_engine
from ..config.pipeline_config import PipelineSettings, pipeline_settings
from ..constants import scoring
from ..constants.lab_tests import ADMIN_LINE_KEYWORDS, CONFIDENCE_TERMS, OCR_CORRECTIONS
from ..core.models import ExtractionResult
from ..utils.exceptions import InputError, OCRError

_HORIZONTAL_SPACE_RE = re.compile(r"[ \t\f\v]+")
_ADMIN_LINE_RE = re.compile("|".join(ADMIN_LINE_KEYWORDS), re.IGNORECASE)
_DECIMAL_RE = re.compile(r"\d+\.\d+")
_UNIT_TOKEN_RE = re.compile(r"g/dL|mg/dL|/[μµu]L|%", re.IGNORECASE)
_OCR_CORRECTION_RES = [(re.compile(p, re.IGNORECASE), r) for p, r in OCR_CORRECTIONS]


class TextExtractor:
    """
    Extracts raw lab test candidates from text or image input.

    Usage:
        extractor = TextExtractor()
        result = extractor.extract_from_text("Hemoglobin 10.2 g/dL (Low)")
        result = await extractor.extract_from_image(png_bytes)
    """

    def __init__(
        self,
        candidate_extractor: Optional[CandidateExtractor] = None,
        ocr_engine: Optional[OCREngine] = None,
        settings: Optional[PipelineSettings] = None,
    ):
        self.candidate_extractor = candidate_extractor or RegexCandidateExtractor()
        self._ocr_engine = ocr_engine
        self.settings = settings or pipeline_settings
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def ocr_engine(self) -> OCREngine:
        if self._ocr_engine is None:
            self._ocr_engine = create_ocr_engine()
        return self._ocr_engine

    def extract_from_text(self, text: Optional[str]) -> ExtractionResult:
        if text is None or not text.strip():
            raise InputError("Text content is required")

        cleaned = self.clean_text(text)
        corrected = self.fix_common_ocr_errors(cleaned)
        tests_raw = self.extract_medical_tests(corrected)
        confidence = self.calculate_text_confidence(corrected, tests_raw)

        self.logger.info(f"Extracted {len(tests_raw)} test candidates (confidence {confidence:.2f})")
        return ExtractionResult(tests_raw=tuple(tests_raw), confidence=confidence, raw_text=cleaned)

    async def extract_from_image(self, image_bytes: Optional[bytes]) -> ExtractionResult:
        if not image_bytes:
            raise InputError("Image content is required")

        try:
            ocr_result = await self.ocr_engine.recognize(image_bytes)
        except OCRError:
            raise
        except Exception as e:
            raise OCRError(f"OCR processing failed: {e}") from e

        cleaned = self.clean_text(ocr_result.text)
        corrected = self.fix_common_ocr_errors(cleaned)
        tests_raw = self.extract_medical_tests(corrected)
        confidence = round(min(max(ocr_result.confidence, 0.0), 1.0), 2)

        if confidence < self.settings.OCR_CONFIDENCE_THRESHOLD:
            self.logger.warning(
                f"Low OCR confidence {confidence:.2f} "
                f"(threshold {self.settings.OCR_CONFIDENCE_THRESHOLD:.2f})"
            )

        self.logger.info(f"Extracted {len(tests_raw)} test candidates from image (confidence {confidence:.2f})")
        return ExtractionResult(tests_raw=tuple(tests_raw), confidence=confidence, raw_text=cleaned)

    def clean_text(self, text: str) -> str:
        """Collapse whitespace, blank out non-printable characters, keep line breaks."""
        lines = []
        for line in text.splitlines():
            printable = "".join(ch if ch.isprintable() else " " for ch in line)
            collapsed = _HORIZONTAL_SPACE_RE.sub(" ", printable).strip()
            if collapsed:
                lines.append(collapsed)
        return "\n".join(lines)

    def fix_common_ocr_errors(self, text: str) -> str:
        for pattern, replacement in _OCR_CORRECTION_RES:
            text = pattern.sub(replacement, text)
        return text

    def extract_medical_tests(self, text: str) -> List[str]:
        candidates = self.candidate_extractor.extract(text)

        if not candidates:
            # Line fallback: anything with both letters and digits that
            # is not a header line
            for line in text.splitlines():
                line = line.strip()
                if (
                    len(line) > 5
                    and re.search(r"\d", line)
                    and re.search(r"[A-Za-z]", line)
                    and not _ADMIN_LINE_RE.search(line)
                ):
                    candidates.append(line)
            if candidates:
                self.logger.debug(f"Line fallback produced {len(candidates)} candidates")

        limit = self.settings.MAX_RAW_CANDIDATES
        if len(candidates) > limit:
            self.logger.warning(f"Truncating {len(candidates)} candidates to {limit}")
        return candidates[:limit]

    def calculate_text_confidence(self, text: str, tests_raw: List[str]) -> float:
        confidence = scoring.TEXT_CONFIDENCE_BASE

        if tests_raw:
            confidence += scoring.TESTS_FOUND_BONUS
        if len(tests_raw) > scoring.MANY_TESTS_THRESHOLD:
            confidence += scoring.MANY_TESTS_BONUS

        lowered = text.lower()
        term_bonus = sum(scoring.CONFIDENCE_TERM_BONUS for term in CONFIDENCE_TERMS if term in lowered)
        confidence += min(term_bonus, scoring.CONFIDENCE_TERM_CAP)

        if _DECIMAL_RE.search(text):
            confidence += scoring.DECIMAL_VALUE_BONUS
        if _UNIT_TOKEN_RE.search(text):
            confidence += scoring.UNIT_TOKEN_BONUS

        if len(text) < scoring.SHORT_TEXT_LENGTH:
            confidence -= scoring.SHORT_TEXT_PENALTY
        if len(text) > scoring.LONG_TEXT_LENGTH:
            confidence -= scoring.LONG_TEXT_PENALTY

        return round(min(max(confidence, 0.0), 1.0), 2)
