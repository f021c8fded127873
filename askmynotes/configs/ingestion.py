"""
Document ingestion configuration.

Chunk window parameters and upload limits for the processing pipeline.

Dependencies: pydantic, pydantic_settings
System role: Ingestion pipeline configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestionSettings(BaseSettings):
    """Chunking and upload settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=1000, gt=0, description="Characters per chunk")
    chunk_overlap: int = Field(default=200, ge=0, description="Characters shared by neighbours")
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [".pdf", ".txt"],
        description="Accepted upload extensions (lowercase, with dot)",
    )
    max_upload_bytes: int = Field(
        default=25 * 1024 * 1024,
        description="Maximum accepted upload size",
    )

    @model_validator(mode="after")
    def _overlap_below_size(self) -> "IngestionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self
