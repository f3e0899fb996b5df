"""
Document CRUD operations.

Provides Create, Read, Update operations for DocumentModel with
workflow-specific queries: eager-loaded detail reads, per-sender and
per-signer listings, row locking and compare-and-set status updates.

Dependencies: sqlalchemy, signflow.boundary.db.models
System role: Document persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from signflow.boundary.db.CRUD.base_crud import BaseCRUD
from signflow.boundary.db.models.document_model import DocumentModel, DocumentStatus
from signflow.boundary.db.models.signature_model import SignatureModel


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with eager-loading reads (async sessions cannot lazy
    load) and guarded status transitions.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_with_details(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> DocumentModel | None:
        """
        Retrieve a document with sender, fields and signatures loaded.

        Args:
            session: Async database session
            id: Document UUID

        Returns:
            DocumentModel if found, None otherwise
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.id == id)
            .options(
                selectinload(DocumentModel.sender),
                selectinload(DocumentModel.fields),
                selectinload(DocumentModel.signatures),
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_documents(
        self,
        session: AsyncSession,
        sender_id: UUID | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        List documents newest first, optionally restricted to one sender.

        Args:
            session: Async database session
            sender_id: Only documents sent by this user (None for all)
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels with sender and signatures loaded
        """
        stmt = (
            select(DocumentModel)
            .options(
                selectinload(DocumentModel.sender),
                selectinload(DocumentModel.signatures),
            )
            .order_by(DocumentModel.created_at.desc())
            .execution_options(populate_existing=True)
            .offset(offset)
        )
        if sender_id is not None:
            stmt = stmt.where(DocumentModel.sender_id == sender_id)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_for_signer(
        self,
        session: AsyncSession,
        signer_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        List documents on which the user holds a signature request.

        Args:
            session: Async database session
            signer_id: Signer user UUID

        Returns:
            Sequence of DocumentModels with sender and signatures loaded
        """
        stmt = (
            select(DocumentModel)
            .join(SignatureModel, SignatureModel.document_id == DocumentModel.id)
            .where(SignatureModel.signer_id == signer_id)
            .options(
                selectinload(DocumentModel.sender),
                selectinload(DocumentModel.signatures),
            )
            .order_by(DocumentModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().unique().all()

    async def lock(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        """
        Fetch a document holding its row lock until the transaction ends.

        Serializes concurrent completion checks for the same document.

        Args:
            session: Async database session
            id: Document UUID

        Returns:
            DocumentModel with current committed state, None if missing
        """
        return await self.get_by_id(session, id, for_update=True)

    async def transition(
        self,
        session: AsyncSession,
        id: UUID,
        from_statuses: tuple[DocumentStatus, ...],
        to_status: DocumentStatus,
        **values,
    ) -> bool:
        """
        Compare-and-set the document status.

        Args:
            session: Async database session
            id: Document UUID
            from_statuses: Statuses the row must currently be in
            to_status: New status
            **values: Extra columns to write with the transition

        Returns:
            True if this call performed the transition
        """
        return await self.update_where(
            session,
            id,
            DocumentModel.status.in_(from_statuses),
            status=to_status,
            **values,
        )

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
        completed_at: datetime,
    ) -> bool:
        """
        Move a document to COMPLETED unless it already is.

        Args:
            session: Async database session
            id: Document UUID
            completed_at: Completion timestamp

        Returns:
            True only for the single call that performed the transition
        """
        return await self.transition(
            session,
            id,
            (DocumentStatus.SENT, DocumentStatus.IN_PROGRESS),
            DocumentStatus.COMPLETED,
            completed_at=completed_at,
        )


document_crud = DocumentCRUD()
