"""
Bearer token verification settings.

Tokens are issued by the upstream identity service; this service only verifies them.

Dependencies: pydantic_settings
System role: Authentication boundary configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """JWT verification configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    jwt_secret: str = Field(
        default="change-me",
        description="Shared secret used to verify access tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_audience: str | None = Field(
        default=None,
        description="Expected 'aud' claim, if the issuer sets one",
    )
