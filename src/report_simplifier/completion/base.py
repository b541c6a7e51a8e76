# ============================================================================
# src/report_simplifier/completion/base.py
# ============================================================================
"""
Base Completion Client Interface

Defines the abstract interface that every completion backend implements.
Supported backends:
- disabled: always unavailable, forces the deterministic fallbacks
- ollama: Ollama server over HTTP
- openai: OpenAI-compatible chat completions
- scripted: canned replies for tests and offline runs
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional
import logging

from ..utils.exceptions import (
    CapabilityUnavailable,
    CompletionError,
    CompletionRequestError,
    RetryableCompletionError,
)


class BackendType(Enum):
    """Supported completion backends."""
    DISABLED = "disabled"
    OLLAMA = "ollama"
    OPENAI = "openai"
    SCRIPTED = "scripted"


def error_for_status(status_code: int, detail: str = "") -> CompletionError:
    """
    Map an HTTP status from a completion backend onto the error taxonomy.

    429 and 5xx are retryable, 404 means the model is not served here,
    every other 4xx is a request the caller has to fix.
    """
    message = f"completion backend returned {status_code}"
    if detail:
        message = f"{message}: {detail[:200]}"

    if status_code == 429 or status_code >= 500:
        return RetryableCompletionError(message, status_code=status_code)
    if status_code == 404:
        return CapabilityUnavailable(message)
    return CompletionRequestError(message, status_code=status_code)


class BaseCompletionClient(ABC):
    """
    Abstract base class for completion clients.

    All backends must implement:
    - complete(): system + user prompt -> reply text
    - health_check(): verify backend is reachable
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

        self._request_count = 0
        self._failure_count = 0
        self._total_request_time = 0.0

    @property
    @abstractmethod
    def backend_type(self) -> BackendType:
        """Return the backend type."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier."""
        pass

    @property
    def is_enabled(self) -> bool:
        return True

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Send one completion request and return the reply text.

        Raises:
            CapabilityUnavailable: backend disabled, unreachable or timed out
            RetryableCompletionError: rate limited or overloaded
            CompletionRequestError: authentication or malformed request
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Check if the backend is available.

        Returns:
            {
                "healthy": bool,
                "backend": str,
                "model": str,
                "details": str
            }
        """
        pass

    async def close(self) -> None:
        """Release any network resources."""
        pass

    def _record_request(self, elapsed: float, failed: bool = False) -> None:
        self._request_count += 1
        self._total_request_time += elapsed
        if failed:
            self._failure_count += 1

    def get_statistics(self) -> Dict[str, Any]:
        """Get request statistics."""
        avg_time = (
            self._total_request_time / self._request_count
            if self._request_count > 0
            else 0.0
        )
        return {
            "backend": self.backend_type.value,
            "model": self.model_name,
            "enabled": self.is_enabled,
            "request_count": self._request_count,
            "failure_count": self._failure_count,
            "total_request_time": self._total_request_time,
            "avg_request_time": avg_time,
        }
