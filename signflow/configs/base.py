"""
Process-wide settings shared by every SignFlow config class.

Reads the environment and an optional .env file; unknown keys are ignored
so one .env can carry every section.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Settings read from DEBUG and LOG_LEVEL."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="FastAPI debug mode (tracebacks in 500 responses)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level passed to configure_logging()",
    )
