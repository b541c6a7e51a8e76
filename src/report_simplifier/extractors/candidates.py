# ============================================================================
# src/report_simplifier/extractors/candidates.py
# ============================================================================
"""
Raw lab test candidate detection.

A candidate is a short string such as "Hemoglobin 10.2 g/dL (Low)"
that is later handed to normalization verbatim. Detection is a set of
ordered regex patterns plus a name allow-list; the extractor interface
lets other strategies plug in.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence

from ..constants.lab_tests import KNOWN_TEST_NAMES, NON_TEST_WORDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidatePattern:
    name: str
    regex: Pattern


# Group order in every pattern: name, value, unit, optional status
DEFAULT_PATTERNS = (
    # "Hemoglobin: 10.2 g/dL (Low)", "WBC - 11200 /μL High"
    CandidatePattern(
        "name_value_unit",
        re.compile(
            r"([A-Za-z][A-Za-z ]+?)\s*[:\-]?\s*(\d+(?:\.\d+)?)\s*"
            r"([a-zA-Z/%μµ]+(?:/[a-zA-Z]+)?)\s*\(?(low|high|normal|abnormal)?\)?",
            re.IGNORECASE,
        ),
    ),
    # Colon-separated only
    CandidatePattern(
        "colon_separated",
        re.compile(
            r"([A-Za-z][A-Za-z ]+?):\s*(\d+(?:\.\d+)?)\s*"
            r"([a-zA-Z/%μµ]+)\s*\(?(low|high|normal|abnormal)?\)?",
            re.IGNORECASE,
        ),
    ),
    # Single-word abbreviations: "WBC 11200/μL", "HDL45mg/dL"
    CandidatePattern(
        "abbreviation",
        re.compile(
            r"([A-Za-z]{2,})\s*(\d+(?:\.\d+)?)\s*([a-zA-Z/%μµ]+)\s*\(?(low|high|normal)?\)?",
            re.IGNORECASE,
        ),
    ),
)

_NON_TEST_WORD_RE = re.compile(r"\b(" + "|".join(NON_TEST_WORDS) + r")\b", re.IGNORECASE)


class CandidateExtractor(ABC):
    """Finds raw test candidate strings in cleaned report text."""

    @abstractmethod
    def extract(self, text: str) -> List[str]:
        pass


class RegexCandidateExtractor(CandidateExtractor):

    def __init__(
        self,
        patterns: Optional[Sequence[CandidatePattern]] = None,
        known_tests: Optional[Sequence[str]] = None,
    ):
        self.patterns = tuple(patterns) if patterns is not None else DEFAULT_PATTERNS
        self.known_tests = [t.lower() for t in (known_tests or KNOWN_TEST_NAMES)]

    def extract(self, text: str) -> List[str]:
        """
        Run every pattern over the text and keep matches whose name looks
        like a lab test. Order is first-seen; duplicates are dropped.
        """
        candidates: List[str] = []
        seen = set()

        for pattern in self.patterns:
            for match in pattern.regex.finditer(text):
                name, value, unit, status = match.groups()
                name = name.strip()
                if not name or not value or not unit:
                    continue
                if not self.is_valid_test_name(name):
                    continue

                candidate = f"{name} {value} {unit}"
                if status:
                    candidate += f" ({status})"

                if candidate not in seen:
                    seen.add(candidate)
                    candidates.append(candidate)

        logger.debug(f"Pattern extraction found {len(candidates)} candidates")
        return candidates

    def is_valid_test_name(self, name: str) -> bool:
        clean = name.lower().strip()

        if len(clean) < 2 or len(clean) > 50:
            return False
        if not re.search(r"[a-z]", clean):
            return False
        if _NON_TEST_WORD_RE.search(clean):
            return False

        return any(known in clean or clean in known for known in self.known_tests)
