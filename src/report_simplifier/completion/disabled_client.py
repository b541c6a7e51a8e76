# ============================================================================
# src/report_simplifier/completion/disabled_client.py
# ============================================================================
"""
Disabled Completion Client

Stands in when no backend is configured. Every request raises
CapabilityUnavailable so the stages take their deterministic fallback.
"""

from typing import Any, Dict, Optional

from .base import BaseCompletionClient, BackendType
from ..utils.exceptions import CapabilityUnavailable


class DisabledCompletionClient(BaseCompletionClient):

    def __init__(self, config: Optional[Dict[str, Any]] = None, reason: str = "completion backend disabled"):
        super().__init__(config)
        self.reason = reason

    @property
    def backend_type(self) -> BackendType:
        return BackendType.DISABLED

    @property
    def model_name(self) -> str:
        return "none"

    @property
    def is_enabled(self) -> bool:
        return False

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        raise CapabilityUnavailable(self.reason)

    async def health_check(self) -> Dict[str, Any]:
        return {
            "healthy": False,
            "backend": self.backend_type.value,
            "model": self.model_name,
            "details": self.reason,
        }
