"""
AI service orchestrator.

Wraps the AI text client with the degradation rules of each capability:
analysis falls back to the raw text as summary, field detection falls back
to an empty list, and contract generation has no fallback. Analyses are
persisted append-only; the latest one is the document's current analysis.

Dependencies: signflow.boundary.ai, signflow.boundary.db
System role: AI use case orchestration
"""

import json
import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.ai.ai_text_client import AITextClient
from signflow.boundary.db.models import AIAnalysisModel, DocumentModel
from signflow.boundary.db.repository import DocumentRepository
from signflow.core.exceptions import (
    AIServiceError,
    DocumentNotFoundError,
    ForbiddenError,
    ValidationError,
)
from signflow.core.workflow import policy
from signflow.core.workflow.policy import Caller
from signflow.models.ai import AnalysisResult, FieldSuggestion

logger = logging.getLogger(__name__)


def extract_json(response_text: str) -> Any:
    """
    Parse JSON from model output.

    Handles various formats (markdown code blocks, etc).

    Raises:
        json.JSONDecodeError: If no JSON could be parsed
    """
    text = response_text
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    return json.loads(text.strip())


def parse_analysis(response_text: str) -> AnalysisResult:
    """Structured analysis, or the raw text as summary when unparseable."""
    try:
        data = extract_json(response_text)
        if not isinstance(data, dict):
            raise ValueError("analysis is not an object")
        return AnalysisResult(
            summary=str(data.get("summary") or ""),
            risks=[str(item) for item in data.get("risks") or []],
            compliance=[str(item) for item in data.get("compliance") or []],
            suggestions=[str(item) for item in data.get("suggestions") or []],
        )
    except (json.JSONDecodeError, ValueError, TypeError) as e:
        logger.warning(f"Failed to parse analysis response: {e}")
        return AnalysisResult(summary=response_text)


def parse_field_suggestions(response_text: str) -> list[FieldSuggestion]:
    """Suggested fields, or an empty list when unparseable."""
    try:
        data = extract_json(response_text)
        items = data.get("fields") if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ValueError("fields is not a list")
        return [FieldSuggestion.model_validate(item) for item in items]
    except (json.JSONDecodeError, ValueError, TypeError, PydanticValidationError) as e:
        logger.warning(f"Failed to parse field detection response: {e}")
        return []


def document_text(document: DocumentModel) -> str:
    """Text used for a document when the client supplies none."""
    parts = [document.title]
    if document.description:
        parts.append(document.description)
    return "\n\n".join(parts)


class AIService:
    """AI service orchestrator."""

    def __init__(self, db: AsyncSession, client: AITextClient) -> None:
        """
        Initialize AI service.

        Args:
            db: Async SQLAlchemy session
            client: AI text client
        """
        self.db = db
        self.repository = DocumentRepository(db)
        self.client = client

    async def _get_viewable_document(self, document_id: UUID, caller: Caller) -> DocumentModel:
        document = await self.repository.get_document_details(document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        signer_ids = (signature.signer_id for signature in document.signatures)
        if not policy.can_view(caller, document.sender_id, signer_ids):
            raise ForbiddenError(user_id=str(caller.user_id), document_id=str(document_id))
        return document

    async def analyze_document(
        self,
        document_id: UUID,
        caller: Caller,
        text: str | None = None,
    ) -> AIAnalysisModel:
        """
        Analyze a document and persist the result.

        Model failures and timeouts degrade to an empty analysis.

        Args:
            document_id: Document UUID
            caller: Anyone allowed to view the document
            text: Document text (document metadata is used when absent)

        Returns:
            AIAnalysisModel: Persisted analysis row
        """
        document = await self._get_viewable_document(document_id, caller)
        source = text if text and text.strip() else document_text(document)

        try:
            result = parse_analysis(await self.client.analyze(source))
        except AIServiceError as e:
            logger.warning(
                "Analysis unavailable, storing fallback",
                extra={"document_id": str(document_id), "error": str(e)},
            )
            result = AnalysisResult()

        try:
            analysis = await self.repository.add_analysis(
                document_id=document_id,
                summary=result.summary,
                risks=result.risks,
                compliance=result.compliance,
                suggestions=result.suggestions,
            )
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            "Document analyzed",
            extra={"document_id": str(document_id), "risk_count": len(result.risks)},
        )
        return analysis

    async def detect_fields(
        self,
        document_id: UUID,
        caller: Caller,
        text: str | None = None,
    ) -> list[FieldSuggestion]:
        """
        Suggest fields for a document; empty on any model failure.
        """
        document = await self._get_viewable_document(document_id, caller)
        source = text if text and text.strip() else document_text(document)
        try:
            return parse_field_suggestions(await self.client.detect_fields(source))
        except AIServiceError as e:
            logger.warning(
                "Field detection unavailable",
                extra={"document_id": str(document_id), "error": str(e)},
            )
            return []

    async def generate_contract(self, prompt: str, contract_type: str) -> str:
        """
        Draft a contract.

        Raises:
            ValidationError: Blank prompt or contract type
            AIServiceError: No contract could be generated
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt is required", field="prompt")
        if not contract_type or not contract_type.strip():
            raise ValidationError("Contract type is required", field="contract_type")
        try:
            return await self.client.generate_contract(prompt.strip(), contract_type.strip())
        except AIServiceError as e:
            raise AIServiceError("Contract generation failed", operation="generate_contract") from e
