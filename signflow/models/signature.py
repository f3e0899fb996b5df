"""
Signature schemas.

Request/response schemas for sending a document and signing it.

Dependencies: pydantic
System role: Signature API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class SignerInput(BaseModel):
    """One invited signer."""

    email: str = Field(description="Signer email; matched case-insensitively")
    name: str = Field(default="", description="Display name recorded on the signature")


class SendDocumentRequest(BaseModel):
    """Request schema for sending a document for signature."""

    signers: list[SignerInput] = Field(default_factory=list)


class SignDocumentRequest(BaseModel):
    """Request schema for signing a document."""

    signature_data: str = Field(description="Opaque signature payload")


class SignatureResponse(BaseModel):
    """Response schema for a signature request."""

    id: uuid.UUID
    document_id: uuid.UUID
    signer_id: uuid.UUID
    signer_email: str
    signer_name: str
    status: str
    signed_at: datetime | None
    created_at: datetime
