"""
Document response mapping utilities.

Transforms ORM models into Pydantic response models.
Centralizes response construction logic.

Dependencies: signflow.models
System role: Document response transformation
"""

from signflow.application.services import DocumentDetails, SigningRequest
from signflow.boundary.db.models import (
    AIAnalysisModel,
    DocumentFieldModel,
    DocumentModel,
    SignatureModel,
    SignatureStatus,
)
from signflow.models.ai import AnalysisResponse
from signflow.models.document import (
    DocumentDetailResponse,
    DocumentResponse,
    SenderResponse,
    SigningRequestResponse,
)
from signflow.models.field import FieldResponse
from signflow.models.signature import SignatureResponse


def map_field_to_response(field: DocumentFieldModel) -> FieldResponse:
    return FieldResponse(
        id=field.id,
        field_type=field.field_type.value,
        label=field.label,
        required=field.required,
        page=field.page,
        x=field.x,
        y=field.y,
        width=field.width,
        height=field.height,
        signer_email=field.signer_email,
        position=field.position,
    )


def map_signature_to_response(signature: SignatureModel) -> SignatureResponse:
    """Signature without its opaque payload or audit columns."""
    return SignatureResponse(
        id=signature.id,
        document_id=signature.document_id,
        signer_id=signature.signer_id,
        signer_email=signature.signer_email,
        signer_name=signature.signer_name,
        status=signature.status.value,
        signed_at=signature.signed_at,
        created_at=signature.created_at,
    )


def map_analysis_to_response(analysis: AIAnalysisModel) -> AnalysisResponse:
    return AnalysisResponse(
        id=analysis.id,
        document_id=analysis.document_id,
        summary=analysis.summary,
        risks=analysis.risks,
        compliance=analysis.compliance,
        suggestions=analysis.suggestions,
        created_at=analysis.created_at,
    )


def _document_fields(document: DocumentModel) -> dict:
    """
    Shared columns of list and detail responses.

    Expects sender and signatures to be eager-loaded.
    """
    signatures = document.signatures
    sender = document.sender
    return {
        "id": document.id,
        "title": document.title,
        "description": document.description,
        "original_filename": document.original_filename,
        "file_url": document.file_url,
        "file_size": document.file_size,
        "mime_type": document.mime_type,
        "status": document.status.value,
        "sender": SenderResponse(
            id=sender.id,
            email=sender.email,
            first_name=sender.first_name,
            last_name=sender.last_name,
        ) if sender is not None else None,
        "signature_count": len(signatures),
        "signed_count": sum(1 for s in signatures if s.status == SignatureStatus.SIGNED),
        "created_at": document.created_at,
        "sent_at": document.sent_at,
        "completed_at": document.completed_at,
    }


def map_document_to_response(document: DocumentModel) -> DocumentResponse:
    return DocumentResponse(**_document_fields(document))


def map_documents_to_response(documents) -> list[DocumentResponse]:
    return [map_document_to_response(document) for document in documents]


def map_details_to_response(details: DocumentDetails) -> DocumentDetailResponse:
    document = details.document
    return DocumentDetailResponse(
        **_document_fields(document),
        fields=[map_field_to_response(field) for field in document.fields],
        signatures=[map_signature_to_response(s) for s in document.signatures],
        analysis=map_analysis_to_response(details.analysis) if details.analysis else None,
    )


def map_signing_request_to_response(request: SigningRequest) -> SigningRequestResponse:
    return SigningRequestResponse(
        document=map_document_to_response(request.document),
        signature_id=request.signature.id,
        signature_status=request.signature.status.value,
        signed_at=request.signature.signed_at,
    )
