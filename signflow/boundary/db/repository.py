"""
Document repository.

Transaction-scoped facade over the CRUD singletons. One repository wraps
one AsyncSession; nothing is committed until commit() is called, so every
workflow operation runs as a single atomic unit.

Dependencies: sqlalchemy, signflow.boundary.db.CRUD
System role: Persistence port for the signature workflow
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db.CRUD import (
    ai_analysis_crud,
    document_crud,
    document_field_crud,
    signature_crud,
    user_crud,
)
from signflow.boundary.db.models import (
    AIAnalysisModel,
    DocumentFieldModel,
    DocumentModel,
    DocumentStatus,
    SignatureModel,
    SignatureStatus,
    UserModel,
)


class DocumentRepository:
    """
    Atomic persistence operations for documents and their signatures.

    Args:
        session: Request-scoped async session that owns the transaction
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    # Users

    async def get_user(self, user_id: UUID) -> UserModel | None:
        return await user_crud.get_by_id(self.session, user_id)

    async def get_user_by_email(self, email: str) -> UserModel | None:
        return await user_crud.get_by_email(self.session, email)

    async def create_user(self, **values: Any) -> UserModel:
        return await user_crud.create(self.session, **values)

    # Documents

    async def create_document(self, **values: Any) -> DocumentModel:
        return await document_crud.create(self.session, **values)

    async def get_document(self, document_id: UUID) -> DocumentModel | None:
        return await document_crud.get_by_id(self.session, document_id)

    async def get_document_details(self, document_id: UUID) -> DocumentModel | None:
        return await document_crud.get_with_details(self.session, document_id)

    async def lock_document(self, document_id: UUID) -> DocumentModel | None:
        return await document_crud.lock(self.session, document_id)

    async def list_documents(self, sender_id: UUID | None = None) -> Sequence[DocumentModel]:
        return await document_crud.list_documents(self.session, sender_id=sender_id)

    async def list_documents_for_signer(self, signer_id: UUID) -> Sequence[DocumentModel]:
        return await document_crud.list_for_signer(self.session, signer_id)

    async def transition_document(
        self,
        document_id: UUID,
        from_statuses: tuple[DocumentStatus, ...],
        to_status: DocumentStatus,
        **values: Any,
    ) -> bool:
        return await document_crud.transition(
            self.session, document_id, from_statuses, to_status, **values
        )

    async def complete_document(self, document_id: UUID, completed_at: datetime) -> bool:
        return await document_crud.mark_completed(self.session, document_id, completed_at)

    # Fields

    async def replace_fields(
        self,
        document_id: UUID,
        fields: list[dict[str, Any]],
    ) -> Sequence[DocumentFieldModel]:
        return await document_field_crud.replace_for_document(self.session, document_id, fields)

    # Signatures

    async def create_signature(self, **values: Any) -> SignatureModel:
        return await signature_crud.create(self.session, **values)

    async def get_signature_for_signer(
        self,
        document_id: UUID,
        signer_id: UUID,
        status: SignatureStatus | None = None,
    ) -> SignatureModel | None:
        return await signature_crud.get_for_signer(self.session, document_id, signer_id, status)

    async def get_signature(self, signature_id: UUID) -> SignatureModel | None:
        return await signature_crud.get_by_id(self.session, signature_id)

    async def sign_if_pending(
        self,
        signature_id: UUID,
        signed_at: datetime,
        signature_data: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> bool:
        return await signature_crud.mark_signed(
            self.session,
            signature_id,
            signed_at=signed_at,
            signature_data=signature_data,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    async def count_pending_signatures(self, document_id: UUID) -> int:
        return await signature_crud.count_pending(self.session, document_id)

    async def count_signed_signatures(self, document_id: UUID) -> int:
        return await signature_crud.count_signed(self.session, document_id)

    # Analyses

    async def add_analysis(self, **values: Any) -> AIAnalysisModel:
        return await ai_analysis_crud.create(self.session, **values)

    async def get_latest_analysis(self, document_id: UUID) -> AIAnalysisModel | None:
        return await ai_analysis_crud.get_latest_for_document(self.session, document_id)
