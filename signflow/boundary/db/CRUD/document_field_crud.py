"""
Document field CRUD operations.

Dependencies: sqlalchemy, signflow.boundary.db.models
System role: Field layout persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db.CRUD.base_crud import BaseCRUD
from signflow.boundary.db.models.document_field_model import DocumentFieldModel


class DocumentFieldCRUD(BaseCRUD[DocumentFieldModel]):
    """CRUD operations for DocumentFieldModel."""

    def __init__(self) -> None:
        """Initialize DocumentFieldCRUD with DocumentFieldModel."""
        super().__init__(DocumentFieldModel)

    async def replace_for_document(
        self,
        session: AsyncSession,
        document_id: UUID,
        fields: list[dict[str, Any]],
    ) -> Sequence[DocumentFieldModel]:
        """
        Delete every field of the document and insert the given set.

        Must run inside the caller's transaction; a failure anywhere leaves
        the previous set intact once the transaction rolls back.

        Args:
            session: Async database session
            document_id: Parent document UUID
            fields: Column values for each new field, in order

        Returns:
            The new field rows in order
        """
        await session.execute(
            delete(DocumentFieldModel)
            .where(DocumentFieldModel.document_id == document_id)
            .execution_options(synchronize_session=False)
        )
        rows = [
            DocumentFieldModel(document_id=document_id, position=index, **values)
            for index, values in enumerate(fields)
        ]
        session.add_all(rows)
        await session.flush()
        return rows


document_field_crud = DocumentFieldCRUD()
