# ============================================================================
# src/report_simplifier/constants/__init__.py
# ============================================================================
"""
Convenient imports for all constants
"""

from .lab_tests import (
    KNOWN_TEST_NAMES,
    CANONICAL_TEST_NAMES,
    ALLOWED_UNITS,
    TEST_NAME_ALIASES,
    COMMON_VARIATIONS,
    TEST_EDUCATION,
)
from .reference_ranges import (
    STANDARD_REFERENCE_RANGES,
    FALLBACK_REFERENCE_RANGES,
    UNIT_FAMILY_RANGES,
    DEFAULT_FALLBACK_RANGE,
)
