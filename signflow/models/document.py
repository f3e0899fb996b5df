"""
Document domain models and schemas.

Request/response schemas for document operations.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from signflow.models.ai import AnalysisResponse
from signflow.models.field import FieldResponse
from signflow.models.signature import SignatureResponse


class CreateDocumentRequest(BaseModel):
    """Request schema for registering an already-stored document."""

    title: str = Field(description="Document title")
    description: str | None = Field(None, max_length=4096)
    storage_key: str = Field(description="Object key of the stored file")
    file_url: str | None = None
    original_filename: str = ""
    file_size: int = Field(default=0, ge=0)
    mime_type: str = "application/pdf"


class SenderResponse(BaseModel):
    """Owner of a document."""

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str


class DocumentResponse(BaseModel):
    """Response schema for document operations."""

    id: uuid.UUID
    title: str
    description: str | None
    original_filename: str
    file_url: str | None
    file_size: int
    mime_type: str
    status: str
    sender: SenderResponse | None = None
    signature_count: int = 0
    signed_count: int = 0
    created_at: datetime
    sent_at: datetime | None
    completed_at: datetime | None


class DocumentDetailResponse(DocumentResponse):
    """Document with fields, signatures and the latest analysis."""

    fields: list[FieldResponse] = Field(default_factory=list)
    signatures: list[SignatureResponse] = Field(default_factory=list)
    analysis: AnalysisResponse | None = None


class SigningRequestResponse(BaseModel):
    """A document the caller was asked to sign, with their own status."""

    document: DocumentResponse
    signature_id: uuid.UUID
    signature_status: str
    signed_at: datetime | None


class DownloadUrlResponse(BaseModel):
    """Presigned download URL."""

    url: str
    expires_at: datetime
