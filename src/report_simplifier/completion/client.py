# ============================================================================
# src/report_simplifier/completion/client.py
# ============================================================================
"""
Completion client factory.

Configuration comes from CompletionSettings (.env / environment) merged
with any dict passed in; passed values take precedence.
"""

import logging
from typing import Any, Dict, Optional

from .base import BaseCompletionClient
from .disabled_client import DisabledCompletionClient
from .ollama_client import OllamaCompletionClient
from .openai_client import OpenAICompletionClient
from ..config.completion_config import CompletionSettings, completion_settings

_logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("disabled", "ollama", "openai")


def create_client(
    config: Optional[Dict[str, Any]] = None,
    settings: Optional[CompletionSettings] = None,
) -> BaseCompletionClient:
    """
    Factory function to create a completion client.

    Args:
        config: Optional overrides:
            - backend: "disabled" | "ollama" | "openai"
            - ollama_host, ollama_model
            - openai_api_key, openai_model, openai_base_url
            - timeout

    Returns:
        Configured client. The openai backend without an API key degrades
        to a disabled client.

    Raises:
        ValueError: If backend type is not supported
    """
    env_config = (settings or completion_settings).as_client_config()
    config = {**env_config, **(config or {})}
    backend = str(config.get('backend') or 'disabled').lower()

    if backend == "disabled":
        return DisabledCompletionClient(config)

    if backend == "ollama":
        return OllamaCompletionClient(config)

    if backend == "openai":
        if not config.get('openai_api_key'):
            _logger.warning("OPENAI_API_KEY not set, completion capability disabled")
            return DisabledCompletionClient(config, reason="OpenAI API key not configured")
        return OpenAICompletionClient(config)

    raise ValueError(
        f"Unsupported completion backend: {backend}. Supported: {', '.join(SUPPORTED_BACKENDS)}"
    )
