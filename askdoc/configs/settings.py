"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides the cached factory used at startup.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from askdoc.configs.base import RootSettings
from askdoc.configs.database import DatabaseSettings, StorageSettings
from askdoc.configs.rag import LLMSettings, RAGSettings
from askdoc.configs.server import AdminSettings, RateLimitSettings, ServerSettings


class Settings(RootSettings):
    """Unified application settings aggregating all config modules."""

    server: ServerSettings = Field(default_factory=ServerSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    rag: RAGSettings = Field(default_factory=RAGSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables and .env are read once; the result is handed to
    create_app() which passes the relevant sections to each component.

    Returns:
        Settings: Application settings instance

    Usage:
        from askdoc.configs import get_settings
        settings = get_settings()
    """
    return Settings()
