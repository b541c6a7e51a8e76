# ============================================================================
# src/report_simplifier/completion/openai_client.py
# ============================================================================
"""
OpenAI-compatible Completion Client

Chat completions through the official openai SDK. The SDK client is
created lazily so importing this module never needs credentials.
SDK-level retries are disabled; complete_with_retry owns the policy.
"""

import time
from typing import Any, Dict, Optional

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from .base import BaseCompletionClient, BackendType, error_for_status
from ..utils.exceptions import CapabilityUnavailable


DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAICompletionClient(BaseCompletionClient):
    """
    Config options:
        openai_api_key: API key (required)
        openai_model: Model name (default: gpt-4o-mini)
        openai_base_url: Optional gateway URL
        timeout: Per-request timeout in seconds (default: 60)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.api_key = self.config.get('openai_api_key')
        self.base_url = self.config.get('openai_base_url')
        self._model_name = self.config.get('openai_model') or DEFAULT_OPENAI_MODEL
        self.timeout = self.config.get('timeout', 60)
        self.default_max_tokens = self.config.get('max_tokens', 1000)
        self.default_temperature = self.config.get('temperature', 0.1)
        self._client: Optional[AsyncOpenAI] = None

    @property
    def backend_type(self) -> BackendType:
        return BackendType.OPENAI

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        start_time = time.monotonic()
        try:
            response = await self.client.chat.completions.create(
                model=self._model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=max_tokens or self.default_max_tokens,
                temperature=temperature if temperature is not None else self.default_temperature,
            )
        except APITimeoutError as e:
            self._record_request(time.monotonic() - start_time, failed=True)
            raise CapabilityUnavailable(f"completion request timed out after {self.timeout}s") from e
        except APIConnectionError as e:
            self._record_request(time.monotonic() - start_time, failed=True)
            raise CapabilityUnavailable(f"Cannot reach completion endpoint: {e}") from e
        except APIStatusError as e:
            self._record_request(time.monotonic() - start_time, failed=True)
            raise error_for_status(e.status_code, str(e)) from e

        elapsed = time.monotonic() - start_time
        self._record_request(elapsed)
        self.logger.info(f"OpenAI completion finished in {elapsed:.2f}s (model={self._model_name})")

        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

    async def health_check(self) -> Dict[str, Any]:
        try:
            await self.client.models.retrieve(self._model_name)
        except (APIConnectionError, APIStatusError) as e:
            return {
                "healthy": False,
                "backend": "openai",
                "model": self._model_name,
                "details": f"Health check failed: {e}",
            }
        return {
            "healthy": True,
            "backend": "openai",
            "model": self._model_name,
            "details": "Model reachable",
        }
