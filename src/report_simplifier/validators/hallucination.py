# ============================================================================
# src/report_simplifier/validators/hallucination.py
# ============================================================================
"""
Hallucination Guard

Every normalized test must be traceable to the raw candidates it came
from. Two tiers:
1. the test name, or a registered alias, appears in the raw text
2. failing that, a looser common-variation match (abbreviation fragments)

Plus a count check: far more normalized tests than raw candidates means
the model invented some. Under-reporting is preferred to fabrication,
so any failure rejects the whole normalization.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..constants.lab_tests import COMMON_VARIATIONS, TEST_NAME_ALIASES
from ..constants.scoring import MAX_NORMALIZED_TO_RAW_RATIO
from ..core.models import NormalizedTest
from ..utils.exceptions import HallucinationError

logger = logging.getLogger(__name__)

HALLUCINATION_REASON = "hallucinated tests not present in input"


class HallucinationGuard:

    def __init__(
        self,
        aliases: Optional[Dict[str, List[str]]] = None,
        common_variations: Optional[Dict[str, List[str]]] = None,
        max_ratio: float = MAX_NORMALIZED_TO_RAW_RATIO,
    ):
        source = aliases if aliases is not None else TEST_NAME_ALIASES
        self.aliases = {name.lower(): [a.lower() for a in names] for name, names in source.items()}
        self.common_variations = common_variations if common_variations is not None else COMMON_VARIATIONS
        self.max_ratio = max_ratio

    def check(self, tests: Sequence[NormalizedTest], tests_raw: Sequence[str]) -> None:
        """
        Raise HallucinationError if any test cannot be traced to tests_raw.
        """
        if len(tests) > len(tests_raw) * self.max_ratio:
            logger.error(
                f"Normalization returned {len(tests)} tests for {len(tests_raw)} raw candidates"
            )
            raise HallucinationError(f"{HALLUCINATION_REASON} - too many normalized tests")

        combined = " ".join(tests_raw).lower()

        for test in tests:
            if self.name_in_text(test.name, combined):
                continue
            if self.is_common_variation(test.name, combined):
                logger.debug(f"{test.name}: accepted through common variation match")
                continue

            logger.error(f"Normalized test '{test.name}' not found in raw input")
            raise HallucinationError(f"{HALLUCINATION_REASON} - {test.name} not found in original data")

    def name_variations(self, name: str) -> List[str]:
        lowered = name.lower().strip()
        variations = [lowered]
        for alias in self.aliases.get(lowered, []):
            if alias not in variations:
                variations.append(alias)
        return variations

    def name_in_text(self, name: str, raw_text: str) -> bool:
        return any(v in raw_text for v in self.name_variations(name))

    def is_common_variation(self, name: str, raw_text: str) -> bool:
        lowered = name.lower().strip()
        for base_test, fragments in self.common_variations.items():
            if base_test in lowered:
                if any(fragment in raw_text for fragment in fragments):
                    return True
        return False
