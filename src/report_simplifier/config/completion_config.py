# ============================================================================
# src/report_simplifier/config/completion_config.py
# ============================================================================
"""
Completion Backend Configuration
- Backend selection (disabled, ollama, openai)
- Connection details per backend
- Retry policy
- Per-stage sampling parameters
"""

from typing import Any, Dict, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CompletionSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    COMPLETION_BACKEND: Literal["disabled", "ollama", "openai"] = Field(
        default="disabled",
        description="Which completion backend to use. 'disabled' forces the deterministic fallbacks."
    )

    # Ollama
    OLLAMA_HOST: str = Field(
        default="http://localhost:11434",
        description="Ollama server URL"
    )
    OLLAMA_MODEL: str = Field(
        default="llama3.1:8b",
        description="Ollama model name"
    )

    # OpenAI-compatible
    OPENAI_API_KEY: Optional[str] = Field(
        default=None,
        description="API key for the OpenAI-compatible backend. Without it the backend is treated as disabled."
    )
    OPENAI_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Chat completion model name"
    )
    OPENAI_BASE_URL: Optional[str] = Field(
        default=None,
        description="Override for OpenAI-compatible gateways"
    )

    COMPLETION_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Per-request timeout for completion calls"
    )
    COMPLETION_MAX_ATTEMPTS: int = Field(
        default=3,
        ge=1, le=10,
        description="Attempts per completion call before giving up"
    )
    COMPLETION_RETRY_BASE_DELAY: float = Field(
        default=1.0,
        ge=0.0,
        description="Initial retry delay in seconds, doubled after each failure"
    )

    NORMALIZATION_MAX_TOKENS: int = Field(default=2000, ge=1)
    NORMALIZATION_TEMPERATURE: float = Field(default=0.1, ge=0.0, le=2.0)
    SUMMARY_MAX_TOKENS: int = Field(default=1500, ge=1)
    SUMMARY_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)

    def as_client_config(self) -> Dict[str, Any]:
        """Flatten into the dict shape accepted by create_client()."""
        return {
            "backend": self.COMPLETION_BACKEND,
            "ollama_host": self.OLLAMA_HOST,
            "ollama_model": self.OLLAMA_MODEL,
            "openai_api_key": self.OPENAI_API_KEY,
            "openai_model": self.OPENAI_MODEL,
            "openai_base_url": self.OPENAI_BASE_URL,
            "timeout": self.COMPLETION_TIMEOUT_SECONDS,
        }


completion_settings = CompletionSettings()
