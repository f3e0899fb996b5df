"""
Template schemas.

Dependencies: pydantic
System role: Template API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CreateTemplateRequest(BaseModel):
    """Request schema for creating a template."""

    name: str = Field(description="Template name")
    description: str | None = None
    file_url: str = Field(description="Location of the template file")
    fields: list[dict] = Field(default_factory=list, description="Predefined field specs")
    is_public: bool = False


class TemplateResponse(BaseModel):
    """Response schema for a template."""

    id: uuid.UUID
    name: str
    description: str | None
    file_url: str
    fields: list[dict]
    is_public: bool
    creator_id: uuid.UUID
    created_at: datetime
