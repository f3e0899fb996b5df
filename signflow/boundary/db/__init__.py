"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin, utcnow: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - UserModel, DocumentModel, DocumentFieldModel, SignatureModel,
    AIAnalysisModel, TemplateModel: Domain entities
  - UserRole, DocumentStatus, FieldType, SignatureStatus: Enum types
  - DocumentRepository: Transaction-scoped facade used by the workflow service

Dependencies: sqlalchemy, signflow.configs
System role: Database adapter providing persistent storage for users,
documents, fields, signatures, analyses and templates.
"""

from signflow.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow
from signflow.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    ping_database,
)
from signflow.boundary.db.models import (
    AIAnalysisModel,
    DocumentFieldModel,
    DocumentModel,
    DocumentStatus,
    FieldType,
    SignatureModel,
    SignatureStatus,
    TemplateModel,
    UserModel,
    UserRole,
)
from signflow.boundary.db.repository import DocumentRepository

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "utcnow",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "ping_database",
    # Models
    "UserModel",
    "UserRole",
    "DocumentModel",
    "DocumentStatus",
    "DocumentFieldModel",
    "FieldType",
    "SignatureModel",
    "SignatureStatus",
    "AIAnalysisModel",
    "TemplateModel",
    # Repository
    "DocumentRepository",
]
