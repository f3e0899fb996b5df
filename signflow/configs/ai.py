"""
AI text service configuration.

Model ids, temperatures and timeouts for the Gemini-backed text service.

Dependencies: pydantic_settings
System role: AI collaborator configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AISettings(BaseSettings):
    """Settings for document analysis, field detection and contract drafting."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AI_",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: str | None = Field(
        default=None,
        description="Google API key for Gemini access",
    )
    analysis_model_id: str = Field(
        default="gemini-2.5-flash",
        description="Model used for document analysis and contract generation",
    )
    detection_model_id: str = Field(
        default="gemini-2.5-flash-lite",
        description="Model used for field detection",
    )
    analysis_temperature: float = Field(default=0.3)
    generation_temperature: float = Field(default=0.2)
    detection_temperature: float = Field(default=0.1)
    request_timeout: float = Field(
        default=60.0,
        description="Upper bound in seconds for a single model call",
    )
