"""
Generation capability configuration.

Model identifiers, per-mode temperatures and output bounds for the
Gemini chat model used for answers, study sets and PDF text extraction.

Dependencies: pydantic_settings
System role: Generative model configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationSettings(BaseSettings):
    """Settings for the generative model adapter."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GENERATION_",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: str | None = Field(
        default=None,
        description="Google AI API key; falls back to GOOGLE_API_KEY in the environment",
    )
    answer_model: str = Field(default="gemini-2.5-flash", description="Model for answers")
    study_model: str = Field(default="gemini-2.5-flash", description="Model for study sets")
    extraction_model: str = Field(
        default="gemini-2.5-flash",
        description="Model for PDF text extraction",
    )

    chat_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    voice_call_temperature: float = Field(default=0.6, ge=0.0, le=2.0)
    study_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    extraction_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    extraction_max_output_tokens: int = Field(
        default=16000,
        description="Upper bound on extracted text length in tokens",
    )

    max_retries: int = Field(
        default=0,
        description="Client-side retries; upstream rate limits are surfaced, not retried",
    )
    history_window: int = Field(
        default=10,
        description="Conversation turns forwarded with each question",
    )
