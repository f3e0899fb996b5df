"""API-specific dependencies."""

# Re-export common dependencies
from .auth import get_current_caller
from .dependencies import (
    get_ai_service,
    get_ai_text_client,
    get_connection_manager,
    get_event_publisher,
    get_s3_document_client,
    get_service_cache,
    get_template_service,
    get_workflow_service,
)

__all__ = [
    "get_ai_service",
    "get_ai_text_client",
    "get_connection_manager",
    "get_current_caller",
    "get_event_publisher",
    "get_s3_document_client",
    "get_service_cache",
    "get_template_service",
    "get_workflow_service",
]
