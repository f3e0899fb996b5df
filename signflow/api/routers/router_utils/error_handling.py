"""
Workflow error handling utilities.

Provides a decorator that maps the application exception hierarchy onto
HTTP status codes for every workflow-facing endpoint.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from signflow.observability.log_utils import safe_log_value
from signflow.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    ForbiddenError,
    NotFoundError,
    SignFlowException,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_ERROR: tuple[tuple[type[SignFlowException], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (DependencyError, status.HTTP_502_BAD_GATEWAY),
)


def status_code_for(error: SignFlowException) -> int:
    """HTTP status for an application exception (500 when unmapped)."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_workflow_errors(func: F) -> F:
    """
    Decorator to handle workflow errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with their details
    - Mapping exception families to HTTP status codes
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except SignFlowException as e:
            status_code = status_code_for(e)
            log = logger.error if status_code >= 500 else logger.warning
            log(
                f"{type(e).__name__}: {e.message}",
                extra={"status_code": status_code, **{k: safe_log_value(v) for k, v in e.details.items()}},
            )
            raise HTTPException(status_code=status_code, detail=e.message) from e

        except Exception as e:
            logger.exception(
                "Unexpected failure in workflow operation",
                extra={"error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred",
            ) from e

    return wrapper  # type: ignore
