"""
Document API endpoints.

Routes:
- POST /documents - Register an already-stored file as a draft
- POST /documents/upload - Upload a file and create a draft
- GET /documents - List documents (admin: all, others: own)
- GET /documents/signing - List documents the caller was asked to sign
- GET /documents/{id} - Get document with fields, signatures and analysis
- GET /documents/{id}/download-url - Presigned download URL
- POST /documents/{id}/fields - Replace the field set of a draft
- POST /documents/{id}/send - Send to signers
- POST /documents/{id}/sign - Sign as the calling signer

Dependencies: signflow.application.services, signflow.models
System role: Document workflow HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from signflow.api.deps import get_current_caller, get_workflow_service
from signflow.api.routers.router_utils import handle_workflow_errors
from signflow.application.services import WorkflowService
from signflow.core.workflow.policy import Caller
from signflow.models.document import (
    CreateDocumentRequest,
    DocumentDetailResponse,
    DocumentResponse,
    DownloadUrlResponse,
    SigningRequestResponse,
)
from signflow.models.field import FieldResponse, ReplaceFieldsRequest
from signflow.models.signature import (
    SendDocumentRequest,
    SignatureResponse,
    SignDocumentRequest,
)

from .document_responses import (
    map_details_to_response,
    map_document_to_response,
    map_documents_to_response,
    map_field_to_response,
    map_signature_to_response,
    map_signing_request_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=201)
@handle_workflow_errors
async def create_document(
    request: CreateDocumentRequest,
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> DocumentResponse:
    """
    Register an already-stored file as a new draft document.

    Raises:
        HTTPException(400): Blank title or storage key
    """
    logger.info("Creating document", extra={"sender_id": str(caller.user_id)})
    document = await workflow.create_document(
        caller,
        title=request.title,
        storage_key=request.storage_key,
        description=request.description,
        file_url=request.file_url,
        original_filename=request.original_filename,
        file_size=request.file_size,
        mime_type=request.mime_type,
    )
    return map_document_to_response(document)


@router.post("/upload", response_model=DocumentResponse, status_code=201)
@handle_workflow_errors
async def upload_document(
    file: UploadFile = File(...),
    title: str = Form(...),
    description: str | None = Form(None),
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> DocumentResponse:
    """
    Upload a document file and create a draft.

    Raises:
        HTTPException(400): Unsupported type, empty or oversized file
        HTTPException(502): Storage unavailable
    """
    content = await file.read()
    logger.info(
        "Uploading document",
        extra={
            "sender_id": str(caller.user_id),
            "upload_filename": file.filename,
            "content_type": file.content_type,
            "size": len(content),
        },
    )
    document = await workflow.upload_document(
        caller,
        title=title,
        filename=file.filename or "document",
        content=content,
        content_type=file.content_type or "application/octet-stream",
        description=description,
    )
    return map_document_to_response(document)


@router.get("", response_model=list[DocumentResponse])
@handle_workflow_errors
async def list_documents(
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> list[DocumentResponse]:
    """List documents visible in the caller's dashboard, newest first."""
    documents = await workflow.list_documents(caller)
    return map_documents_to_response(documents)


@router.get("/signing", response_model=list[SigningRequestResponse])
@handle_workflow_errors
async def list_signing_requests(
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> list[SigningRequestResponse]:
    """List documents the caller was invited to sign."""
    requests = await workflow.list_signing_requests(caller)
    return [map_signing_request_to_response(r) for r in requests]


@router.get("/{document_id}", response_model=DocumentDetailResponse)
@handle_workflow_errors
async def get_document(
    document_id: UUID,
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> DocumentDetailResponse:
    """
    Get a document with fields, signatures and latest analysis.

    Raises:
        HTTPException(403): Caller is not admin, sender or signer
        HTTPException(404): Document not found
    """
    details = await workflow.get_document(document_id, caller)
    return map_details_to_response(details)


@router.get("/{document_id}/download-url", response_model=DownloadUrlResponse)
@handle_workflow_errors
async def get_download_url(
    document_id: UUID,
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> DownloadUrlResponse:
    """Presigned download URL for the stored file."""
    url, expires_at = await workflow.get_download_url(document_id, caller)
    return DownloadUrlResponse(url=url, expires_at=expires_at)


@router.post("/{document_id}/fields", response_model=list[FieldResponse])
@handle_workflow_errors
async def replace_fields(
    document_id: UUID,
    request: ReplaceFieldsRequest,
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> list[FieldResponse]:
    """
    Replace the field set of a draft document.

    Raises:
        HTTPException(400): Unknown field type or blank label
        HTTPException(403): Caller is neither sender nor admin
        HTTPException(404): Document not found or no longer a draft
    """
    logger.info(
        "Replacing document fields",
        extra={"document_id": str(document_id), "field_count": len(request.fields)},
    )
    fields = await workflow.replace_fields(document_id, caller, request.fields)
    return [map_field_to_response(field) for field in fields]


@router.post("/{document_id}/send", response_model=list[SignatureResponse])
@handle_workflow_errors
async def send_document(
    document_id: UUID,
    request: SendDocumentRequest,
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> list[SignatureResponse]:
    """
    Send a document to one or more signers.

    Raises:
        HTTPException(400): No signers, invalid or duplicate email, already invited
        HTTPException(403): Caller is neither sender nor admin
        HTTPException(404): Document not found or already completed
    """
    logger.info(
        "Sending document",
        extra={"document_id": str(document_id), "signer_count": len(request.signers)},
    )
    signatures = await workflow.send_document(document_id, caller, request.signers)
    return [map_signature_to_response(signature) for signature in signatures]


@router.post("/{document_id}/sign", response_model=SignatureResponse)
@handle_workflow_errors
async def sign_document(
    document_id: UUID,
    request: SignDocumentRequest,
    http_request: Request,
    caller: Caller = Depends(get_current_caller),
    workflow: WorkflowService = Depends(get_workflow_service),
) -> SignatureResponse:
    """
    Sign the caller's pending signature on a document.

    Raises:
        HTTPException(400): Blank signature payload
        HTTPException(404): No pending signature for the caller
        HTTPException(409): Concurrent update, retry
    """
    signature = await workflow.sign_document(
        document_id,
        caller,
        signature_data=request.signature_data,
        ip_address=http_request.client.host if http_request.client else None,
        user_agent=http_request.headers.get("user-agent"),
    )
    return map_signature_to_response(signature)
