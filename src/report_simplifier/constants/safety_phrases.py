# ============================================================================
# src/report_simplifier/constants/safety_phrases.py
# ============================================================================
"""
Patient Language Safety Lists
- Urgency phrases stripped from generated text
- Directive phrases that always reject a summary
- Diagnostic phrases that reject unless hedged
- Diagnosis terms that only produce warnings
"""

URGENCY_PHRASES = ["you must", "you should immediately", "emergency", "urgent care"]

DIRECTIVE_PHRASES = [
    "you have",
    "you are diagnosed",
    "you need to",
    "immediately see",
    "start treatment",
    "take medication",
    "emergency",
    "urgent",
    "you should stop",
    "avoid",
    "increase your",
    "decrease your",
]

DIAGNOSTIC_PHRASES = ["serious condition", "disease", "illness", "syndrome"]

DIAGNOSIS_TERMS = [
    "diabetes", "anemia", "infection", "cancer", "leukemia",
    "kidney disease", "liver disease", "heart disease", "thyroid disorder",
]

HEDGING_PHRASES = [
    "may relate to",
    "may be related to",
    "may be associated with",
    "can be associated with",
    "could be associated with",
    "can sometimes",
    "might",
]
