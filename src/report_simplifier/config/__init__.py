# ============================================================================
# src/report_simplifier/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .pipeline_config import PipelineSettings, pipeline_settings
from .completion_config import CompletionSettings, completion_settings
from .logging_config import LoggingSettings, logging_settings

__all__ = [
    "PipelineSettings",
    "pipeline_settings",
    "CompletionSettings",
    "completion_settings",
    "LoggingSettings",
    "logging_settings",
]
