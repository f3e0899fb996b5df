"""Service orchestrators."""

from .ai_service import AIService
from .notification_service import ConnectionManager, EventPublisher, NotificationDispatcher
from .signer_resolver import SignerResolver
from .template_service import TemplateService
from .workflow_service import DocumentDetails, SigningRequest, WorkflowService

__all__ = [
    "AIService",
    "ConnectionManager",
    "DocumentDetails",
    "EventPublisher",
    "NotificationDispatcher",
    "SignerResolver",
    "SigningRequest",
    "TemplateService",
    "WorkflowService",
]
