# ============================================================================
# src/report_simplifier/completion/scripted_client.py
# ============================================================================
"""
Scripted Completion Client

Returns queued replies in order. A queued exception instance is raised
instead of returned, which lets tests script rate limits and outages.
"""

from collections import deque
from typing import Any, Dict, Iterable, List, Optional, Union

from .base import BaseCompletionClient, BackendType
from ..utils.exceptions import CapabilityUnavailable


class ScriptedCompletionClient(BaseCompletionClient):

    def __init__(
        self,
        responses: Iterable[Union[str, BaseException]] = (),
        default: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(config)
        self._responses = deque(responses)
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    @property
    def backend_type(self) -> BackendType:
        return BackendType.SCRIPTED

    @property
    def model_name(self) -> str:
        return "scripted"

    def queue(self, *responses: Union[str, BaseException]) -> None:
        self._responses.extend(responses)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })

        if not self._responses:
            if self.default is not None:
                self._record_request(0.0)
                return self.default
            self._record_request(0.0, failed=True)
            raise CapabilityUnavailable("scripted completion exhausted")

        item = self._responses.popleft()
        if isinstance(item, BaseException):
            self._record_request(0.0, failed=True)
            raise item
        self._record_request(0.0)
        return item

    async def health_check(self) -> Dict[str, Any]:
        return {
            "healthy": True,
            "backend": self.backend_type.value,
            "model": self.model_name,
            "details": f"{len(self._responses)} scripted replies queued",
        }
