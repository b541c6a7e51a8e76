# ============================================================================
# src/report_simplifier/completion/retry.py
# ============================================================================
"""
Retry wrapper for completion calls.

Only RetryableCompletionError is retried, with exponential backoff.
Running out of attempts is reported as CapabilityUnavailable so callers
can switch to their deterministic fallback.
"""

import asyncio
import logging
from typing import Optional

from .base import BaseCompletionClient
from ..utils.exceptions import CapabilityUnavailable, RetryableCompletionError

logger = logging.getLogger(__name__)


async def complete_with_retry(
    client: BaseCompletionClient,
    system_prompt: str,
    user_prompt: str,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    operation: str = "completion",
) -> str:
    """
    Call client.complete() up to max_attempts times.

    Delay before attempt n+1 is base_delay * 2**(n-1).
    """
    last_error: Optional[RetryableCompletionError] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return await client.complete(
                system_prompt,
                user_prompt,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except RetryableCompletionError as e:
            last_error = e
            if attempt == max_attempts:
                break
            delay = base_delay * (2 ** (attempt - 1))
            logger.warning(
                f"{operation}: attempt {attempt}/{max_attempts} failed ({e}), "
                f"retrying in {delay:.1f}s"
            )
            await asyncio.sleep(delay)

    logger.error(f"{operation}: all {max_attempts} attempts failed")
    raise CapabilityUnavailable(
        f"{operation} unavailable after {max_attempts} attempts: {last_error}"
    ) from last_error
