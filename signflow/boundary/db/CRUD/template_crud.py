"""
Template CRUD operations.

Dependencies: sqlalchemy, signflow.boundary.db.models
System role: Template persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from signflow.boundary.db.CRUD.base_crud import BaseCRUD
from signflow.boundary.db.models.template_model import TemplateModel


class TemplateCRUD(BaseCRUD[TemplateModel]):
    """CRUD operations for TemplateModel."""

    def __init__(self) -> None:
        """Initialize TemplateCRUD with TemplateModel."""
        super().__init__(TemplateModel)

    async def list_visible_to(
        self,
        session: AsyncSession,
        user_id: UUID,
    ) -> Sequence[TemplateModel]:
        """
        Templates the user created plus every public template, newest first.

        Args:
            session: Async database session
            user_id: Requesting user UUID

        Returns:
            Sequence of TemplateModels with creator loaded
        """
        stmt = (
            select(TemplateModel)
            .where(or_(TemplateModel.creator_id == user_id, TemplateModel.is_public.is_(True)))
            .options(selectinload(TemplateModel.creator))
            .order_by(TemplateModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()


template_crud = TemplateCRUD()
