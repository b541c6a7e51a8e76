# ============================================================================
# src/report_simplifier/completion/ollama_client.py
# ============================================================================
"""
Ollama Completion Client

Uses a local Ollama server through its /api/generate HTTP endpoint.

Setup:
    1. Install Ollama: https://ollama.ai
    2. Pull a model: ollama pull llama3.1:8b
    3. Start server: ollama serve
"""

import asyncio
import time
from typing import Any, Dict, Optional

import aiohttp

from .base import BaseCompletionClient, BackendType, error_for_status
from ..utils.exceptions import CapabilityUnavailable


DEFAULT_OLLAMA_MODEL = "llama3.1:8b"


class OllamaCompletionClient(BaseCompletionClient):
    """
    Ollama-based completion client.

    Config options:
        ollama_host: Ollama server URL (default: http://localhost:11434)
        ollama_model: Model name (default: llama3.1:8b)
        max_tokens: Default max tokens (default: 1000)
        temperature: Default temperature (default: 0.1)
        timeout: Per-request timeout in seconds (default: 60)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)

        self.host = (self.config.get('ollama_host') or 'http://localhost:11434').rstrip('/')
        self._model_name = self.config.get('ollama_model') or DEFAULT_OLLAMA_MODEL

        self.default_max_tokens = self.config.get('max_tokens', 1000)
        self.default_temperature = self.config.get('temperature', 0.1)
        self.timeout = self.config.get('timeout', 60)

        # HTTP session (created lazily, tied to event loop)
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None

        self.logger.info(f"Ollama client initialized: {self.host}, model={self._model_name}")

    @property
    def backend_type(self) -> BackendType:
        return BackendType.OLLAMA

    @property
    def model_name(self) -> str:
        return self._model_name

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for current event loop."""
        current_loop = asyncio.get_running_loop()

        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop is not current_loop
        )

        if needs_new_session:
            if self._session is not None and not self._session.closed:
                await self._session.close()

            timeout = aiohttp.ClientTimeout(total=None, sock_connect=30)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._session_loop = current_loop

        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._session_loop = None

    async def health_check(self) -> Dict[str, Any]:
        """
        Check if Ollama server is running and the model is pulled.
        """
        try:
            session = await self._get_session()

            async with session.get(f"{self.host}/api/tags") as response:
                if response.status != 200:
                    return {
                        "healthy": False,
                        "backend": "ollama",
                        "model": self._model_name,
                        "details": f"Ollama server returned status {response.status}"
                    }

                data = await response.json()
                models = [m.get('name', '') for m in data.get('models', [])]

                if not any(self._model_name in m for m in models):
                    return {
                        "healthy": False,
                        "backend": "ollama",
                        "model": self._model_name,
                        "details": f"Model not found. Available: {models}. Run: ollama pull {self._model_name}"
                    }

                return {
                    "healthy": True,
                    "backend": "ollama",
                    "model": self._model_name,
                    "details": "Ollama server running and model available"
                }

        except aiohttp.ClientError as e:
            return {
                "healthy": False,
                "backend": "ollama",
                "model": self._model_name,
                "details": f"Cannot connect to Ollama at {self.host}: {e}"
            }

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        max_tokens = max_tokens or self.default_max_tokens
        temperature = temperature if temperature is not None else self.default_temperature
        start_time = time.monotonic()

        payload = {
            "model": self._model_name,
            "system": system_prompt,
            "prompt": user_prompt,
            "stream": False,
            "options": {
                "num_predict": max_tokens,
                "temperature": temperature,
            }
        }

        try:
            session = await self._get_session()

            async def _do_request() -> Dict[str, Any]:
                async with session.post(f"{self.host}/api/generate", json=payload) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise error_for_status(response.status, error_text)
                    return await response.json()

            data = await asyncio.wait_for(_do_request(), timeout=self.timeout)

        except asyncio.TimeoutError as e:
            self._record_request(time.monotonic() - start_time, failed=True)
            self.logger.error(f"Ollama request timed out after {self.timeout}s (model={self._model_name})")
            raise CapabilityUnavailable(f"completion request timed out after {self.timeout}s") from e
        except aiohttp.ClientConnectorError as e:
            self._record_request(time.monotonic() - start_time, failed=True)
            raise CapabilityUnavailable(
                f"Cannot connect to Ollama at {self.host}. Make sure Ollama is running: ollama serve"
            ) from e
        except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, aiohttp.ContentTypeError) as e:
            # Connection dropped or body unreadable
            self._record_request(time.monotonic() - start_time, failed=True)
            self.logger.error(f"Ollama request failed at {self.host}: {type(e).__name__}")
            raise CapabilityUnavailable(
                f"Ollama at {self.host} failed mid-request ({type(e).__name__})"
            ) from e
        except Exception:
            self._record_request(time.monotonic() - start_time, failed=True)
            raise

        elapsed = time.monotonic() - start_time
        self._record_request(elapsed)
        self.logger.info(
            f"Generated {data.get('eval_count', 0)} tokens in {elapsed:.2f}s"
        )
        return (data.get('response') or '').strip()
