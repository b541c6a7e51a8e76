# ============================================================================
# src/report_simplifier/constants/reference_ranges.py
# ============================================================================
"""
Reference Ranges
- Expected adult ranges used to sanity-check model-supplied ranges
- Fallback ranges for deterministic normalization
"""

# Canonical test -> unit -> (low, high); plausibility check for AI output
STANDARD_REFERENCE_RANGES = {
    "Hemoglobin": {"g/dL": (10.0, 18.0)},
    "WBC": {"/μL": (3000.0, 15000.0), "/uL": (3000.0, 15000.0)},
    "Glucose": {"mg/dL": (60.0, 140.0)},
    "Cholesterol": {"mg/dL": (120.0, 300.0)},
    "Creatinine": {"mg/dL": (0.5, 2.0)},
    "Platelets": {"/μL": (100000.0, 500000.0), "/uL": (100000.0, 500000.0)},
}

# Lowercase name fragment -> normalized unit -> (low, high)
# Units are lowercased, leading "/" removed and micro sign folded to "u"
FALLBACK_REFERENCE_RANGES = {
    "hemoglobin": {"g/dl": (12.0, 16.0)},
    "hgb": {"g/dl": (12.0, 16.0)},
    "wbc": {"ul": (4000.0, 11000.0)},
    "white blood cell": {"ul": (4000.0, 11000.0)},
    "glucose": {"mg/dl": (70.0, 100.0)},
    "bun": {"mg/dl": (7.0, 20.0)},
    "blood urea nitrogen": {"mg/dl": (7.0, 20.0)},
    "creatinine": {"mg/dl": (0.6, 1.2)},
}

# Checked in order; mg/dl must come before g/dl
UNIT_FAMILY_RANGES = [
    ("mg/dl", (70.0, 140.0)),
    ("g/dl", (10.0, 18.0)),
    ("ul", (3000.0, 12000.0)),
]

DEFAULT_FALLBACK_RANGE = (0.0, 1000.0)
