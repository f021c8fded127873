"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from askmynotes.configs.base import BaseSettings
from askmynotes.configs.database import DatabaseSettings
from askmynotes.configs.generation import GenerationSettings
from askmynotes.configs.ingestion import IngestionSettings
from askmynotes.configs.storage import StorageSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    max_subjects_per_session: int = Field(
        default=3,
        description="Subjects a single anonymous session may own",
    )

    # Aggregated settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; call `get_settings.cache_clear()`
    in tests that need a fresh view.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
