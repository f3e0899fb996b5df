"""
Template service orchestrator.

Dependencies: signflow.boundary.db.CRUD
System role: Template use case orchestration
"""

import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db.CRUD import template_crud
from signflow.boundary.db.models import TemplateModel
from signflow.core.exceptions import ValidationError
from signflow.core.workflow.policy import Caller

logger = logging.getLogger(__name__)


class TemplateService:
    """Template service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_templates(self, caller: Caller) -> Sequence[TemplateModel]:
        """The caller's templates plus every public one, newest first."""
        return await template_crud.list_visible_to(self.db, caller.user_id)

    async def create_template(
        self,
        caller: Caller,
        name: str,
        file_url: str,
        description: str | None = None,
        fields: list[dict] | None = None,
        is_public: bool = False,
    ) -> TemplateModel:
        """
        Create a template owned by the caller.

        Raises:
            ValidationError: Blank name or file_url
        """
        if not name or not name.strip():
            raise ValidationError("Template name is required", field="name")
        if not file_url or not file_url.strip():
            raise ValidationError("Template file URL is required", field="file_url")

        try:
            template = await template_crud.create(
                self.db,
                name=name.strip(),
                description=description,
                file_url=file_url.strip(),
                fields=fields or [],
                is_public=is_public,
                creator_id=caller.user_id,
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to create template", extra={"error": str(e)})
            raise

        logger.info(
            "Template created",
            extra={"template_id": str(template.id), "is_public": is_public},
        )
        return template
