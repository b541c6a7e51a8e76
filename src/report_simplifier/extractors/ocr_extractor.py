# ============================================================================
# src/report_simplifier/extractors/ocr_extractor.py
# ============================================================================
"""
OCR for uploaded lab report images.

Tesseract through pytesseract; Pillow decodes the upload. Word-level
results are regrouped into lines so the candidate patterns see the
same layout a text upload would have.
"""

import asyncio
import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError

from ..utils.exceptions import OCRError


@dataclass(frozen=True)
class OCRResult:
    """Result from OCR extraction."""
    text: str
    confidence: float  # 0.0 - 1.0, mean over recognized words
    method: str = "tesseract"
    word_count: int = 0


class OCREngine(ABC):
    """Anything that turns image bytes into text with a confidence."""

    @abstractmethod
    async def recognize(self, image_bytes: bytes) -> OCRResult:
        pass


class TesseractOCREngine(OCREngine):

    def __init__(self, language: str = "eng", tesseract_config: str = "--psm 6"):
        self.language = language
        self.tesseract_config = tesseract_config
        self.logger = logging.getLogger(self.__class__.__name__)

    async def recognize(self, image_bytes: bytes) -> OCRResult:
        image = self._load_image(image_bytes)
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, self._ocr_with_tesseract, image)
        except pytesseract.TesseractNotFoundError as e:
            raise OCRError("Tesseract is not installed or not on PATH") from e
        except pytesseract.TesseractError as e:
            raise OCRError(f"OCR processing failed: {e}") from e

        self.logger.info(
            f"OCR complete: {len(result.text)} chars, {result.word_count} words, "
            f"{result.confidence:.2f} confidence"
        )
        return result

    def _load_image(self, image_bytes: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise OCRError(f"Unreadable image: {e}") from e

        # Grayscale helps Tesseract on phone photos of printed reports
        image = ImageOps.exif_transpose(image)
        return ImageOps.autocontrast(image.convert("L"))

    def _ocr_with_tesseract(self, image: Image.Image) -> OCRResult:
        data = pytesseract.image_to_data(
            image,
            lang=self.language,
            config=self.tesseract_config,
            output_type=pytesseract.Output.DICT,
        )
        text, confidence, word_count = assemble_lines(data)
        return OCRResult(text=text, confidence=confidence, method="tesseract", word_count=word_count)


def assemble_lines(data: Dict[str, List]) -> Tuple[str, float, int]:
    """
    Rebuild line-broken text from pytesseract.image_to_data output.

    Returns (text, mean confidence 0-1, recognized word count).
    Words with a negative confidence are layout rows, not text.
    """
    lines: Dict[Tuple[int, int, int], List[str]] = {}
    order: List[Tuple[int, int, int]] = []
    confidences: List[float] = []

    for i, raw_conf in enumerate(data.get('conf', [])):
        conf = float(raw_conf)
        word = str(data['text'][i]).strip()
        if conf < 0 or not word:
            continue

        key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
        if key not in lines:
            lines[key] = []
            order.append(key)
        lines[key].append(word)
        confidences.append(conf / 100.0)

    text = "\n".join(" ".join(lines[key]) for key in order)
    avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return text, avg_confidence, len(confidences)


def create_ocr_engine(language: Optional[str] = None) -> OCREngine:
    return TesseractOCREngine(language=language or "eng")
