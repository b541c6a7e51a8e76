# ============================================================================
# src/report_simplifier/validators/plausibility.py
# ============================================================================
"""
Reference Range Plausibility

Model-supplied reference ranges are compared with standard adult ranges.
A range is plausible when it sits within 50% below / 50% above the
standard one. Failures are logged, never fatal.

Example:
- Hemoglobin g/dL {12, 16} -> PASS
- Hemoglobin g/dL {1, 100} -> FAIL (low bound below 5.0)
"""

import logging
from typing import Dict, Optional, Tuple

from ..constants.reference_ranges import STANDARD_REFERENCE_RANGES
from ..constants.scoring import RANGE_HIGH_TOLERANCE, RANGE_LOW_TOLERANCE, VALUE_CEILING_FACTOR
from ..core.models import NormalizedTest

logger = logging.getLogger(__name__)


class ReferenceRangeChecker:

    def __init__(self, standard_ranges: Optional[Dict[str, Dict[str, Tuple[float, float]]]] = None):
        self.ranges = standard_ranges if standard_ranges is not None else STANDARD_REFERENCE_RANGES

    def check(self, test: NormalizedTest) -> Tuple[bool, Optional[str]]:
        """
        Returns:
            (is_plausible, reason_if_not)
        """
        low, high = test.ref_range.low, test.ref_range.high
        if high - low <= 0:
            return False, f"Empty reference range {low}-{high}"

        expected = self.ranges.get(test.name, {}).get(test.unit)
        # Unknown test / unit combinations are assumed plausible
        if expected is None:
            return True, None

        exp_low, exp_high = expected
        if low < exp_low * RANGE_LOW_TOLERANCE or high > exp_high * RANGE_HIGH_TOLERANCE:
            reason = (
                f"Reference range {low}-{high} {test.unit} far from expected "
                f"{exp_low}-{exp_high} {test.unit}"
            )
            logger.warning(f"{test.name}: {reason}")
            return False, reason

        return True, None

    def quality_score(self, test: NormalizedTest) -> int:
        """0-2: one point for a plausible range, one for a value under 10x the range ceiling."""
        score = 0
        if self.check(test)[0]:
            score += 1
        if 0 < test.value < test.ref_range.high * VALUE_CEILING_FACTOR:
            score += 1
        return score
