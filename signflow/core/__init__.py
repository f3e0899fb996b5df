"""
Core business logic module.

Contains the exception hierarchy and the pure workflow rules
(state machine and role policy). No I/O happens here.
"""

from signflow.core.exceptions import (
    AIServiceError,
    AuthenticationError,
    ConflictError,
    DependencyError,
    DocumentNotFoundError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    SignatureNotFoundError,
    SignFlowException,
    StorageError,
    ValidationError,
)

__all__ = [
    "SignFlowException",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "DocumentNotFoundError",
    "SignatureNotFoundError",
    "InvalidStateError",
    "ConflictError",
    "DependencyError",
    "StorageError",
    "AIServiceError",
]
