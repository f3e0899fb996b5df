"""
AI schemas.

Request/response schemas for analysis, field detection and contract drafting.

Dependencies: pydantic
System role: AI API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class DocumentTextRequest(BaseModel):
    """Optional document text; the document's own metadata is used when absent."""

    text: str | None = Field(default=None, description="Extracted document text")


class AnalysisResult(BaseModel):
    """Structured analysis returned by the AI service."""

    summary: str = ""
    risks: list[str] = Field(default_factory=list)
    compliance: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class AnalysisResponse(AnalysisResult):
    """Persisted analysis row."""

    id: uuid.UUID
    document_id: uuid.UUID
    created_at: datetime


class FieldSuggestion(BaseModel):
    """Field placement suggested by the AI service."""

    type: str
    label: str
    required: bool = True
    suggested_position: str | None = Field(default=None, alias="suggestedPosition")

    model_config = {"populate_by_name": True}


class DetectFieldsResponse(BaseModel):
    """Response schema for field detection."""

    fields: list[FieldSuggestion]


class GenerateContractRequest(BaseModel):
    """Request schema for contract generation."""

    prompt: str = Field(description="Requirements for the contract")
    contract_type: str = Field(description="Kind of contract, e.g. NDA")


class GenerateContractResponse(BaseModel):
    """Response schema for contract generation."""

    contract: str
