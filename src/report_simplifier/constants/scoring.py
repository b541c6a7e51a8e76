# ============================================================================
# src/report_simplifier/constants/scoring.py
# ============================================================================
"""
Scoring Constants
- Extraction confidence heuristic
- Status classification bands
- Normalization confidence weights
- Hallucination guard ratios
- Summary length bounds
"""

# Extraction confidence
TEXT_CONFIDENCE_BASE = 0.5
TESTS_FOUND_BONUS = 0.2
MANY_TESTS_BONUS = 0.1
MANY_TESTS_THRESHOLD = 2
CONFIDENCE_TERM_BONUS = 0.05
CONFIDENCE_TERM_CAP = 0.15
DECIMAL_VALUE_BONUS = 0.05
UNIT_TOKEN_BONUS = 0.10
SHORT_TEXT_LENGTH = 20
SHORT_TEXT_PENALTY = 0.2
LONG_TEXT_LENGTH = 2000
LONG_TEXT_PENALTY = 0.1

# Status classification: beyond 30% outside the range is critical
CRITICAL_LOW_FACTOR = 0.7
CRITICAL_HIGH_FACTOR = 1.3

# Reference-range plausibility tolerance against the standard table
RANGE_LOW_TOLERANCE = 0.5
RANGE_HIGH_TOLERANCE = 1.5
VALUE_CEILING_FACTOR = 10

# Normalization confidence
INPUT_CONFIDENCE_WEIGHT = 0.7
COVERAGE_WEIGHT = 0.2
QUALITY_WEIGHT = 0.1
NOTES_PENALTY = 0.05
FALLBACK_CONFIDENCE_FACTOR = 0.5
FALLBACK_CONFIDENCE_FLOOR = 0.3

# Hallucination guard
MAX_NORMALIZED_TO_RAW_RATIO = 1.5

# Summary bounds
SUMMARY_MIN_LENGTH = 20
SUMMARY_MAX_LENGTH = 500
FINAL_SUMMARY_MIN_LENGTH = 10
