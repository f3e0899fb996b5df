"""
Template API endpoints.

Routes:
- GET /templates - List own and public templates
- POST /templates - Create a template

Dependencies: signflow.application.services, signflow.models
System role: Template HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from signflow.api.deps import get_current_caller, get_template_service
from signflow.api.routers.router_utils import handle_workflow_errors
from signflow.application.services import TemplateService
from signflow.boundary.db.models import TemplateModel
from signflow.core.workflow.policy import Caller
from signflow.models.template import CreateTemplateRequest, TemplateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


def map_template_to_response(template: TemplateModel) -> TemplateResponse:
    return TemplateResponse(
        id=template.id,
        name=template.name,
        description=template.description,
        file_url=template.file_url,
        fields=template.fields,
        is_public=template.is_public,
        creator_id=template.creator_id,
        created_at=template.created_at,
    )


@router.get("", response_model=list[TemplateResponse])
@handle_workflow_errors
async def list_templates(
    caller: Caller = Depends(get_current_caller),
    template_service: TemplateService = Depends(get_template_service),
) -> list[TemplateResponse]:
    """List the caller's templates and every public template."""
    templates = await template_service.list_templates(caller)
    return [map_template_to_response(template) for template in templates]


@router.post("", response_model=TemplateResponse, status_code=201)
@handle_workflow_errors
async def create_template(
    request: CreateTemplateRequest,
    caller: Caller = Depends(get_current_caller),
    template_service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    """
    Create a template.

    Raises:
        HTTPException(400): Blank name or file URL
    """
    logger.info("Creating template", extra={"user_id": str(caller.user_id)})
    template = await template_service.create_template(
        caller,
        name=request.name,
        file_url=request.file_url,
        description=request.description,
        fields=request.fields,
        is_public=request.is_public,
    )
    return map_template_to_response(template)
