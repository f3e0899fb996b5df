"""
Exception hierarchy for the SignFlow application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.
The API layer maps each family to one transport status code.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class SignFlowException(Exception):
    """Base exception for all SignFlow application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(SignFlowException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class AuthenticationError(SignFlowException):
    """Raised when the caller's bearer token is missing or invalid."""

    pass


class ForbiddenError(SignFlowException):
    """Raised when an authenticated caller may not perform the action."""

    def __init__(
        self,
        message: str = "Access denied",
        user_id: str | None = None,
        document_id: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if user_id:
            details["user_id"] = user_id
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class NotFoundError(SignFlowException):
    """Raised when an entity is absent or not in a state the request applies to."""

    pass


class DocumentNotFoundError(NotFoundError):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize document not found error.

        Args:
            document_id: ID of the missing document
            details: Additional context
        """
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class SignatureNotFoundError(NotFoundError):
    """Raised when the caller has no pending signature on a document.

    Covers both "never invited" and "already signed".
    """

    def __init__(self, document_id: str, signer_id: str) -> None:
        super().__init__(
            "Signature not found or already completed",
            {"document_id": document_id, "signer_id": signer_id},
        )


class InvalidStateError(NotFoundError):
    """Raised when a document is in the wrong status for the requested transition."""

    def __init__(self, message: str, document_id: str, status: str) -> None:
        super().__init__(message, {"document_id": document_id, "status": status})


class ConflictError(SignFlowException):
    """Raised when a concurrent mutation defeated a precondition. Retryable."""

    pass


class DependencyError(SignFlowException):
    """Base exception for failures of external collaborators. Retryable."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize dependency error.

        Args:
            message: Error message
            operation: Operation that failed (put, get, analyze, generate)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class StorageError(DependencyError):
    """Raised when object storage operations fail."""

    pass


class AIServiceError(DependencyError):
    """Raised when the AI text service produced no usable output."""

    pass
