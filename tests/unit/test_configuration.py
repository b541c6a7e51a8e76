# ============================================================================
# FILE: tests/unit/test_configuration.py
# ============================================================================
"""
Unit tests for settings loading
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from report_simplifier.config import CompletionSettings, LoggingSettings, PipelineSettings


def test_pipeline_defaults(monkeypatch):
    monkeypatch.delenv("MAX_RAW_CANDIDATES", raising=False)
    settings = PipelineSettings(_env_file=None)

    assert settings.OCR_CONFIDENCE_THRESHOLD == 0.5
    assert settings.NORMALIZATION_CONFIDENCE_THRESHOLD == 0.7
    assert settings.MAX_RAW_CANDIDATES == 20
    assert settings.INTER_STAGE_DELAY_SECONDS == 0.5
    assert settings.SAFETY_RETRY_ATTEMPTS == 1


def test_completion_defaults(monkeypatch):
    monkeypatch.delenv("COMPLETION_BACKEND", raising=False)
    settings = CompletionSettings(_env_file=None)

    assert settings.COMPLETION_BACKEND == "disabled"
    assert settings.COMPLETION_MAX_ATTEMPTS == 3
    assert settings.NORMALIZATION_TEMPERATURE == 0.1
    assert settings.SUMMARY_TEMPERATURE == 0.2


def test_environment_overrides(monkeypatch):
    """Test settings read from environment variables"""
    monkeypatch.setenv("MAX_RAW_CANDIDATES", "5")
    monkeypatch.setenv("COMPLETION_BACKEND", "ollama")
    monkeypatch.setenv("OLLAMA_MODEL", "llama3.2:3b")

    assert PipelineSettings(_env_file=None).MAX_RAW_CANDIDATES == 5
    completion = CompletionSettings(_env_file=None)
    assert completion.COMPLETION_BACKEND == "ollama"
    assert completion.OLLAMA_MODEL == "llama3.2:3b"


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("SAFETY_RETRY_ATTEMPTS", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("SAFETY_RETRY_ATTEMPTS=2\nUNRELATED_SETTING=ignored\n")

    assert PipelineSettings(_env_file=env_file).SAFETY_RETRY_ATTEMPTS == 2


@pytest.mark.parametrize("field,value", [
    ("OCR_CONFIDENCE_THRESHOLD", 1.5),
    ("NORMALIZATION_CONFIDENCE_THRESHOLD", -0.1),
    ("MAX_RAW_CANDIDATES", 0),
    ("SAFETY_RETRY_ATTEMPTS", 5),
])
def test_pipeline_bounds(field, value):
    with pytest.raises(ValidationError):
        PipelineSettings(_env_file=None, **{field: value})


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        CompletionSettings(_env_file=None, COMPLETION_BACKEND="gemini")


def test_as_client_config():
    settings = CompletionSettings(
        _env_file=None,
        COMPLETION_BACKEND="openai",
        OPENAI_API_KEY="sk-test",
        COMPLETION_TIMEOUT_SECONDS=15,
    )
    config = settings.as_client_config()

    assert config["backend"] == "openai"
    assert config["openai_api_key"] == "sk-test"
    assert config["timeout"] == 15.0


def test_logging_settings():
    settings = LoggingSettings(_env_file=None, LOG_LEVEL="DEBUG", LOG_FILE="logs/app.log")

    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.LOG_FILE == Path("logs/app.log")
    assert settings.LOG_JSON is False
