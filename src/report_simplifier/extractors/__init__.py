"""
Extraction stage: text / image -> raw test candidates.
"""

from .candidates import CandidateExtractor, CandidatePattern, RegexCandidateExtractor
from .ocr_extractor import OCREngine, OCRResult, TesseractOCREngine
from .text_extractor import TextExtractor

__all__ = [
    "CandidateExtractor",
    "CandidatePattern",
    "RegexCandidateExtractor",
    "OCREngine",
    "OCRResult",
    "TesseractOCREngine",
    "TextExtractor",
]
