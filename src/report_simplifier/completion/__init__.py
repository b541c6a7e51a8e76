"""
Completion clients and helpers.

Usage:
    from report_simplifier.completion import create_client, complete_with_retry

    client = create_client({"backend": "ollama"})
    text = await complete_with_retry(client, system_prompt, user_prompt)
"""

from .base import BaseCompletionClient, BackendType, error_for_status
from .client import create_client
from .disabled_client import DisabledCompletionClient
from .json_parsing import extract_json_object
from .ollama_client import OllamaCompletionClient
from .openai_client import OpenAICompletionClient
from .retry import complete_with_retry
from .scripted_client import ScriptedCompletionClient

__all__ = [
    "BaseCompletionClient",
    "BackendType",
    "error_for_status",
    "create_client",
    "DisabledCompletionClient",
    "OllamaCompletionClient",
    "OpenAICompletionClient",
    "ScriptedCompletionClient",
    "complete_with_retry",
    "extract_json_object",
]
