"""
AI analysis CRUD operations.

Dependencies: sqlalchemy, signflow.boundary.db.models
System role: Analysis persistence operations
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db.CRUD.base_crud import BaseCRUD
from signflow.boundary.db.models.ai_analysis_model import AIAnalysisModel


class AIAnalysisCRUD(BaseCRUD[AIAnalysisModel]):
    """CRUD operations for AIAnalysisModel."""

    def __init__(self) -> None:
        """Initialize AIAnalysisCRUD with AIAnalysisModel."""
        super().__init__(AIAnalysisModel)

    async def get_latest_for_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> AIAnalysisModel | None:
        """Most recent analysis of the document, if any."""
        stmt = (
            select(AIAnalysisModel)
            .where(AIAnalysisModel.document_id == document_id)
            .order_by(AIAnalysisModel.created_at.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


ai_analysis_crud = AIAnalysisCRUD()
