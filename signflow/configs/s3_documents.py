"""
S3 Documents bucket configuration.

Settings for raw document storage bucket, upload limits and presigned URL generation.

Dependencies: pydantic_settings
System role: S3 documents bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3DocumentsSettings(BaseSettings):
    """Settings for S3 documents bucket operations."""

    model_config = SettingsConfigDict(
        env_prefix="S3_DOCUMENTS_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="signflow-dev-documents",
        description="S3 bucket for raw document storage",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned URL expiry in seconds (default 1 hour)",
    )
    connect_timeout: int = Field(default=5, description="S3 connect timeout in seconds")
    read_timeout: int = Field(default=30, description="S3 read timeout in seconds")
    max_upload_bytes: int = Field(
        default=50 * 1024 * 1024,
        description="Maximum accepted upload size (default 50MB)",
    )
    allowed_content_types: list[str] = Field(
        default=[
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ],
        description="MIME types accepted for document upload",
    )
