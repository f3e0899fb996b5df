"""
Signature CRUD operations.

Provides signature lookups per document and signer, and the guarded
PENDING → SIGNED update that gives each signature exactly one winner.

Dependencies: sqlalchemy, signflow.boundary.db.models
System role: Signature persistence operations
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db.CRUD.base_crud import BaseCRUD
from signflow.boundary.db.models.signature_model import SignatureModel, SignatureStatus


class SignatureCRUD(BaseCRUD[SignatureModel]):
    """CRUD operations for SignatureModel."""

    def __init__(self) -> None:
        """Initialize SignatureCRUD with SignatureModel."""
        super().__init__(SignatureModel)

    async def get_for_signer(
        self,
        session: AsyncSession,
        document_id: UUID,
        signer_id: UUID,
        status: SignatureStatus | None = None,
    ) -> SignatureModel | None:
        """
        Retrieve the signature a user holds on a document.

        Args:
            session: Async database session
            document_id: Document UUID
            signer_id: Signer user UUID
            status: Only match a row in this status

        Returns:
            SignatureModel if found, None otherwise
        """
        stmt = (
            select(SignatureModel)
            .where(
                SignatureModel.document_id == document_id,
                SignatureModel.signer_id == signer_id,
            )
            .execution_options(populate_existing=True)
        )
        if status is not None:
            stmt = stmt.where(SignatureModel.status == status)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_pending(self, session: AsyncSession, document_id: UUID) -> int:
        """Number of signatures of the document still PENDING."""
        stmt = select(func.count(SignatureModel.id)).where(
            SignatureModel.document_id == document_id,
            SignatureModel.status == SignatureStatus.PENDING,
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def count_signed(self, session: AsyncSession, document_id: UUID) -> int:
        """Number of signatures of the document already SIGNED."""
        stmt = select(func.count(SignatureModel.id)).where(
            SignatureModel.document_id == document_id,
            SignatureModel.status == SignatureStatus.SIGNED,
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def mark_signed(
        self,
        session: AsyncSession,
        id: UUID,
        signed_at: datetime,
        signature_data: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> bool:
        """
        Transition one signature PENDING → SIGNED.

        The status check is part of the UPDATE statement, so of two
        concurrent callers only one can match the row.

        Args:
            session: Async database session
            id: Signature UUID
            signed_at: Signing timestamp
            signature_data: Opaque signature payload
            ip_address: Submitting IP (audit)
            user_agent: Submitting user agent (audit)

        Returns:
            True if this call signed the row, False if it was no longer PENDING
        """
        return await self.update_where(
            session,
            id,
            SignatureModel.status == SignatureStatus.PENDING,
            status=SignatureStatus.SIGNED,
            signed_at=signed_at,
            signature_data=signature_data,
            ip_address=ip_address,
            user_agent=user_agent,
        )


signature_crud = SignatureCRUD()
