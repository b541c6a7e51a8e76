# ============================================================================
# src/report_simplifier/prompts.py
# ============================================================================
"""
Prompt Templates

Provides:
- Normalization prompts (raw candidates -> structured tests JSON)
- Patient summary prompts (structured tests -> summary JSON)
"""

from typing import Sequence

from .constants.lab_tests import ALLOWED_UNITS, CANONICAL_TEST_NAMES
from .core.enums import LabStatus
from .core.models import NormalizedTest, format_number


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


NORMALIZATION_SYSTEM_TEMPLATE = """You are a medical data normalization expert. Standardize lab test results into a consistent JSON format.

RULES:
1. ONLY normalize tests that are clearly present in the input
2. NEVER add, invent or guess test results that are not in the input
3. If a test name is abbreviated or misspelled but value and unit are clear, use the closest standard test name
4. Provide realistic adult reference ranges from standard guidelines
5. Status must be one of: {statuses}
6. If a test cannot be normalized confidently, leave it out

Standard test names to use when possible:
{test_names}

Allowed units:
{units}

Respond with a single JSON object:
{{
  "tests": [
    {{
      "name": "Standard Test Name",
      "value": 0.0,
      "unit": "unit",
      "status": "low|normal|high|critical",
      "ref_range": {{"low": 0.0, "high": 0.0}}
    }}
  ],
  "notes": ["processing notes or concerns"]
}}"""


NORMALIZATION_USER_TEMPLATE = """Normalize these lab test results. Extract name, value and unit, and determine status from the reference range.

RAW TEST RESULTS:
{raw_tests}

Requirements:
- Only process tests visible in the input above
- Use standard test names
- Include a reference range for each test
- Leave out anything that cannot be parsed confidently

Return valid JSON only, no additional text."""


SUMMARY_SYSTEM_PROMPT = """You write patient-friendly explanations of lab results. Help patients understand what their tests measure in simple terms, without alarming them and without diagnosing.

SAFETY RULES:
1. NEVER give a diagnosis or a treatment recommendation
2. NEVER tell the patient to take an action such as seeing a doctor right away or starting medication
3. NEVER say results indicate a specific disease or condition
4. Use hedged phrases such as "may relate to", "could be associated with", "sometimes indicates"
5. Remind the reader that a healthcare provider should interpret the results
6. Focus on general education about what each test measures
7. If a value is critical, only say it is "outside the normal range"

STYLE:
- Simple, non-technical language (8th grade reading level)
- Calm, friendly and professional tone
- Summary between 20 and 500 characters

Respond with a single JSON object:
{
  "summary": "Brief overview of all findings in simple terms",
  "explanations": ["One explanation per abnormal test"]
}

Examples of good explanations:
- "Low hemoglobin may relate to various factors that affect red blood cells."
- "Glucose levels can be higher for many reasons and are worth discussing with your healthcare provider."
"""


SUMMARY_USER_TEMPLATE = """Create a patient-friendly explanation for these lab results. Focus on education, not diagnosis.

LABORATORY RESULTS:
{results}

Requirements:
- A brief summary of the overall findings
- One explanation for each abnormal (low, high or critical) result
- Simple, reassuring language
- Encourage discussing the results with a healthcare provider

Return valid JSON only with "summary" and "explanations"."""


def build_normalization_system_prompt() -> str:
    return NORMALIZATION_SYSTEM_TEMPLATE.format(
        statuses=", ".join(f'"{s.value}"' for s in LabStatus),
        test_names=_bullets(CANONICAL_TEST_NAMES),
        units=_bullets(ALLOWED_UNITS),
    )


def build_normalization_user_prompt(tests_raw: Sequence[str]) -> str:
    raw_tests = "\n".join(f"{i}. {test}" for i, test in enumerate(tests_raw, start=1))
    return NORMALIZATION_USER_TEMPLATE.format(raw_tests=raw_tests)


def format_test_line(test: NormalizedTest) -> str:
    return (
        f"{test.name}: {format_number(test.value)} {test.unit} ({test.status.value.upper()}) - "
        f"Normal range: {format_number(test.ref_range.low)}-{format_number(test.ref_range.high)} {test.unit}"
    )


def build_summary_user_prompt(tests: Sequence[NormalizedTest]) -> str:
    return SUMMARY_USER_TEMPLATE.format(results="\n".join(format_test_line(t) for t in tests))
