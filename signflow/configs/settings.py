"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from signflow.configs.ai import AISettings
from signflow.configs.auth import AuthSettings
from signflow.configs.base import BaseSettings
from signflow.configs.database import DatabaseSettings
from signflow.configs.s3_documents import S3DocumentsSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    s3_documents: S3DocumentsSettings = S3DocumentsSettings()
    ai: AISettings = AISettings()
    auth: AuthSettings = AuthSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from signflow.configs import get_settings
        settings = get_settings()
    """
    return Settings()
