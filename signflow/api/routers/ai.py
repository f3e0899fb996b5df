"""
AI API endpoints.

Routes:
- POST /ai/analyze/{document_id} - Analyze a document and store the result
- POST /ai/detect-fields/{document_id} - Suggest fields for a document
- POST /ai/generate-contract - Draft a contract

Dependencies: signflow.application.services, signflow.models
System role: AI pass-through HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends

from signflow.api.deps import get_ai_service, get_current_caller
from signflow.api.routers.documents.document_responses import map_analysis_to_response
from signflow.api.routers.router_utils import handle_workflow_errors
from signflow.application.services import AIService
from signflow.core.workflow.policy import Caller
from signflow.models.ai import (
    AnalysisResponse,
    DetectFieldsResponse,
    DocumentTextRequest,
    GenerateContractRequest,
    GenerateContractResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/analyze/{document_id}", response_model=AnalysisResponse)
@handle_workflow_errors
async def analyze_document(
    document_id: UUID,
    request: DocumentTextRequest | None = Body(default=None),
    caller: Caller = Depends(get_current_caller),
    ai_service: AIService = Depends(get_ai_service),
) -> AnalysisResponse:
    """
    Analyze a document. Model failures degrade to an empty analysis.

    Raises:
        HTTPException(403): Caller may not view the document
        HTTPException(404): Document not found
    """
    logger.info("Analyzing document", extra={"document_id": str(document_id)})
    analysis = await ai_service.analyze_document(
        document_id, caller, text=request.text if request else None
    )
    return map_analysis_to_response(analysis)


@router.post("/detect-fields/{document_id}", response_model=DetectFieldsResponse)
@handle_workflow_errors
async def detect_fields(
    document_id: UUID,
    request: DocumentTextRequest | None = Body(default=None),
    caller: Caller = Depends(get_current_caller),
    ai_service: AIService = Depends(get_ai_service),
) -> DetectFieldsResponse:
    """Suggest fields for a document. Empty when the model is unavailable."""
    fields = await ai_service.detect_fields(
        document_id, caller, text=request.text if request else None
    )
    return DetectFieldsResponse(fields=fields)


@router.post("/generate-contract", response_model=GenerateContractResponse)
@handle_workflow_errors
async def generate_contract(
    request: GenerateContractRequest,
    caller: Caller = Depends(get_current_caller),
    ai_service: AIService = Depends(get_ai_service),
) -> GenerateContractResponse:
    """
    Draft a contract.

    Raises:
        HTTPException(400): Blank prompt or contract type
        HTTPException(502): Model produced no contract
    """
    logger.info(
        "Generating contract",
        extra={"contract_type": request.contract_type, "user_id": str(caller.user_id)},
    )
    contract = await ai_service.generate_contract(request.prompt, request.contract_type)
    return GenerateContractResponse(contract=contract)
