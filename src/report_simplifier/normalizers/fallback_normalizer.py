# ============================================================================
# src/report_simplifier/normalizers/fallback_normalizer.py
# ============================================================================
"""
Deterministic Fallback Normalizer

Used whenever the completion capability is unavailable. Parses each raw
candidate with a few fixed templates, looks up a reference range from a
static table and classifies status without the critical tier.

Confidence is deliberately lower than the AI path:
    max(input_confidence * 0.5, 0.3)
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from ..constants.reference_ranges import (
    DEFAULT_FALLBACK_RANGE,
    FALLBACK_REFERENCE_RANGES,
    UNIT_FAMILY_RANGES,
)
from ..constants.scoring import FALLBACK_CONFIDENCE_FACTOR, FALLBACK_CONFIDENCE_FLOOR
from ..core.models import NormalizationResult, NormalizedTest, ReferenceRange
from ..core.status import determine_basic_status

FALLBACK_NOTE = "AI normalization unavailable - using basic parsing fallback"

# First match wins: "Name: Value Unit", "Name Value Unit", "Name Value Unit (Status)"
BASIC_TEST_PATTERNS = (
    re.compile(r"([a-zA-Z\s]+):\s*([0-9.,]+)\s*([a-zA-Z/μµ%]+)"),
    re.compile(r"([a-zA-Z\s]+)\s+([0-9.,]+)\s+([a-zA-Z/μµ%]+)"),
    re.compile(r"([a-zA-Z\s]+)\s+([0-9.,]+)\s+([a-zA-Z/μµ%]+)\s*\([^)]+\)"),
)


def normalize_unit_key(unit: str) -> str:
    """'/μL' -> 'ul', 'g/dL' -> 'g/dl'"""
    return unit.strip().lower().lstrip("/").replace("μ", "u").replace("µ", "u")


class FallbackNormalizer:

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def normalize_tests(
        self,
        tests_raw: Sequence[str],
        input_confidence: float = 0.8,
    ) -> NormalizationResult:
        tests: List[NormalizedTest] = []
        for raw in tests_raw:
            parsed = self.parse_basic_test(raw)
            if parsed is None:
                self.logger.debug(f"Fallback could not parse candidate: {raw!r}")
                continue
            tests.append(parsed)

        confidence = round(max(input_confidence * FALLBACK_CONFIDENCE_FACTOR, FALLBACK_CONFIDENCE_FLOOR), 2)
        self.logger.info(
            f"Fallback normalized {len(tests)}/{len(tests_raw)} candidates (confidence {confidence:.2f})"
        )

        return NormalizationResult(
            tests=tuple(tests),
            normalization_confidence=confidence,
            processing_notes=(FALLBACK_NOTE,),
            used_fallback=True,
        )

    def parse_basic_test(self, raw: str) -> Optional[NormalizedTest]:
        for pattern in BASIC_TEST_PATTERNS:
            match = pattern.search(raw)
            if not match:
                continue

            name = re.sub(r"^CBC:\s*", "", match.group(1).strip(), flags=re.IGNORECASE).strip()
            unit = match.group(3).strip()
            try:
                value = float(match.group(2).replace(",", ""))
            except ValueError:
                return None
            if not name:
                return None

            low, high = self.get_basic_reference_range(name, unit)
            ref_range = ReferenceRange(low=low, high=high)
            return NormalizedTest(
                name=name,
                value=value,
                unit=unit,
                status=determine_basic_status(value, ref_range),
                ref_range=ref_range,
            )
        return None

    def get_basic_reference_range(self, name: str, unit: str) -> Tuple[float, float]:
        name_key = name.lower()
        unit_key = normalize_unit_key(unit)

        for fragment, by_unit in FALLBACK_REFERENCE_RANGES.items():
            if fragment in name_key and unit_key in by_unit:
                return by_unit[unit_key]

        for family, default_range in UNIT_FAMILY_RANGES:
            if family in unit_key:
                return default_range

        return DEFAULT_FALLBACK_RANGE
