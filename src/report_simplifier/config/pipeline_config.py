# ============================================================================
# src/report_simplifier/config/pipeline_config.py
# ============================================================================
"""
Pipeline Thresholds
- OCR confidence floor
- Normalization confidence warning
- Candidate truncation
- Inter-stage pacing
- Safety regeneration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OCR_CONFIDENCE_THRESHOLD: float = Field(
        default=0.5,
        ge=0.0, le=1.0,
        description="Below this OCR confidence the extraction is flagged as low quality"
    )
    NORMALIZATION_CONFIDENCE_THRESHOLD: float = Field(
        default=0.7,
        ge=0.0, le=1.0,
        description="Below this normalization confidence a warning is logged"
    )
    MAX_RAW_CANDIDATES: int = Field(
        default=20,
        ge=1,
        description="Maximum number of raw test candidates kept after extraction"
    )
    INTER_STAGE_DELAY_SECONDS: float = Field(
        default=0.5,
        ge=0.0,
        description="Pause between normalization and summary to pace completion requests"
    )
    SAFETY_RETRY_ATTEMPTS: int = Field(
        default=1,
        ge=0, le=3,
        description="Extra summary generations allowed after a safety rejection"
    )


pipeline_settings = PipelineSettings()
