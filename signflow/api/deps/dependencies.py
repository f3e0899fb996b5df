"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: signflow.configs, signflow.application, signflow.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.configs import get_settings
from signflow.boundary.db import get_async_db
from signflow.boundary.ai.ai_text_client import AITextClient
from signflow.boundary.aws.s3_client import S3DocumentClient
from signflow.application.services import (
    AIService,
    ConnectionManager,
    EventPublisher,
    NotificationDispatcher,
    TemplateService,
    WorkflowService,
)


class ServiceCache:
    """Container for process-wide collaborators. Never caches database rows."""

    def __init__(self):
        self._s3_client = None
        self._ai_client = None
        self._publisher = None
        self._connection_manager = None
        self._dispatcher = None

    @property
    def s3_client(self) -> S3DocumentClient:
        """Get cached S3 document client."""
        if self._s3_client is None:
            settings = get_settings()
            self._s3_client = S3DocumentClient(
                bucket=settings.s3_documents.bucket,
                region=settings.s3_documents.region,
                connect_timeout=settings.s3_documents.connect_timeout,
                read_timeout=settings.s3_documents.read_timeout,
            )
        return self._s3_client

    @property
    def ai_client(self) -> AITextClient:
        """Get cached Gemini text client."""
        if self._ai_client is None:
            self._ai_client = AITextClient.from_settings(get_settings().ai)
        return self._ai_client

    @property
    def publisher(self) -> EventPublisher:
        """Get cached event publisher."""
        if self._publisher is None:
            self._publisher = EventPublisher()
        return self._publisher

    @property
    def connection_manager(self) -> ConnectionManager:
        """Get cached WebSocket connection manager."""
        if self._connection_manager is None:
            self._connection_manager = ConnectionManager()
        return self._connection_manager

    @property
    def dispatcher(self) -> NotificationDispatcher:
        """Get cached notification dispatcher."""
        if self._dispatcher is None:
            self._dispatcher = NotificationDispatcher(self.publisher, self.connection_manager)
        return self._dispatcher

    def clear(self) -> None:
        """Clear all cached instances."""
        self._s3_client = None
        self._ai_client = None
        self._publisher = None
        self._connection_manager = None
        self._dispatcher = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_s3_document_client() -> S3DocumentClient:
    """
    Get S3 document client.

    Returns:
        S3DocumentClient: Client for document bucket operations
    """
    return get_service_cache().s3_client


def get_event_publisher() -> EventPublisher:
    """Get the process-wide event publisher."""
    return get_service_cache().publisher


def get_connection_manager() -> ConnectionManager:
    """Get the process-wide WebSocket connection manager."""
    return get_service_cache().connection_manager


def get_ai_text_client() -> AITextClient:
    """Get the Gemini text client."""
    return get_service_cache().ai_client


def get_workflow_service(
    db: AsyncSession = Depends(get_async_db),
    storage: S3DocumentClient = Depends(get_s3_document_client),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> WorkflowService:
    """
    Get workflow service instance.

    Args:
        db: Async database session (injected via Depends)
        storage: S3 document client (injected)
        publisher: Event publisher (injected)

    Returns:
        WorkflowService: Workflow service bound to this request's session
    """
    return WorkflowService(
        db=db,
        storage=storage,
        publisher=publisher,
        storage_settings=get_settings().s3_documents,
    )


def get_ai_service(
    db: AsyncSession = Depends(get_async_db),
    client: AITextClient = Depends(get_ai_text_client),
) -> AIService:
    """
    Get AI service instance.

    Args:
        db: Async database session (injected via Depends)
        client: AI text client (injected)

    Returns:
        AIService: AI service instance
    """
    return AIService(db=db, client=client)


def get_template_service(db: AsyncSession = Depends(get_async_db)) -> TemplateService:
    """
    Get template service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        TemplateService: Template service instance
    """
    return TemplateService(db=db)
