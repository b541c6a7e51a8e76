"""
Normalization stage: raw candidates -> NormalizedTest records.
"""

from .ai_normalizer import AINormalizer
from .fallback_normalizer import FALLBACK_NOTE, FallbackNormalizer

__all__ = ["AINormalizer", "FallbackNormalizer", "FALLBACK_NOTE"]
