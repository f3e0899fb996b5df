"""
Document field schemas.

Request/response schemas for the field layout of a document.
field_type and label are validated by the workflow service so a bad value
surfaces as a 400 with a readable message.

Dependencies: pydantic
System role: Field API contracts
"""

import uuid

from pydantic import BaseModel, Field


class FieldInput(BaseModel):
    """One field in a replace-fields request."""

    field_type: str = Field(description="SIGNATURE | DATE | TEXT | INITIAL")
    label: str = Field(description="Display label")
    required: bool = True
    page: int = Field(default=1, ge=1)
    x: float = 0.0
    y: float = 0.0
    width: float | None = None
    height: float | None = None
    signer_email: str | None = Field(default=None, description="Signer this field is assigned to")


class ReplaceFieldsRequest(BaseModel):
    """Request schema for replacing a document's field set."""

    fields: list[FieldInput] = Field(default_factory=list)


class FieldResponse(BaseModel):
    """Response schema for a persisted field."""

    id: uuid.UUID
    field_type: str
    label: str
    required: bool
    page: int
    x: float
    y: float
    width: float | None
    height: float | None
    signer_email: str | None
    position: int
