# ============================================================================
# src/report_simplifier/completion/json_parsing.py
# ============================================================================
"""
JSON extraction from completion replies.

Models often wrap the JSON in prose or code fences, e.g.
"Here are the results: {"tests": [...]}". Tries, in order:
- direct parse of the whole reply
- the first balanced {...} block (brace matching skips braces inside strings)
- json_repair on that block (single quotes, trailing commas, ...)
"""

import json
import logging
from typing import Any, Dict, Optional

from json_repair import repair_json

logger = logging.getLogger(__name__)


def find_json_block(text: str) -> Optional[str]:
    """Return the first balanced top-level {...} block, or None."""
    start_idx = text.find('{')
    if start_idx == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start_idx, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]

    # Unbalanced: hand the tail to json_repair
    return text[start_idx:]


def extract_json_object(response_text: str) -> Optional[Dict[str, Any]]:
    """
    Extract a JSON object from generated text.

    Returns None when nothing object-shaped can be recovered.
    """
    if not response_text or not response_text.strip():
        logger.warning("Empty response text, no JSON to extract")
        return None

    # Try 1: Direct parse of entire response
    try:
        parsed = json.loads(response_text.strip())
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    # Try 2: First balanced block
    json_str = find_json_block(response_text)
    if json_str is None:
        logger.warning("No JSON found in response")
        return None

    try:
        parsed = json.loads(json_str)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    # Try 3: json_repair on the extracted block
    try:
        repaired = repair_json(json_str, return_objects=True)
        if isinstance(repaired, dict) and repaired:
            logger.debug("json_repair fixed extracted JSON block")
            return repaired
    except Exception as e:
        logger.debug(f"json_repair failed on extracted block: {e}")

    logger.warning(f"Could not parse JSON from response: {response_text[:200]}...")
    return None
