"""
Test suite for the workflow error mapping decorator.

System role: Verification of exception → HTTP status mapping
"""

import pytest
from fastapi import HTTPException

from signflow.api.routers.router_utils import handle_workflow_errors, status_code_for
from signflow.core.exceptions import (
    AIServiceError,
    AuthenticationError,
    ConflictError,
    DocumentNotFoundError,
    ForbiddenError,
    InvalidStateError,
    SignatureNotFoundError,
    SignFlowException,
    StorageError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error,expected",
    [
        (ValidationError("bad"), 400),
        (AuthenticationError("no token"), 401),
        (ForbiddenError(), 403),
        (DocumentNotFoundError("d"), 404),
        (SignatureNotFoundError("d", "u"), 404),
        (InvalidStateError("not a draft", document_id="d", status="SENT"), 404),
        (ConflictError("retry"), 409),
        (StorageError("s3 down"), 502),
        (AIServiceError("timeout"), 502),
        (SignFlowException("unmapped"), 500),
    ],
)
def test_status_code_for(error, expected):
    assert status_code_for(error) == expected


@pytest.mark.asyncio
async def test_decorator_maps_application_errors():
    @handle_workflow_errors
    async def endpoint():
        raise ConflictError("Document changed while sending, retry the request")

    with pytest.raises(HTTPException) as exc_info:
        await endpoint()

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Document changed while sending, retry the request"


@pytest.mark.asyncio
async def test_decorator_hides_unexpected_errors():
    @handle_workflow_errors
    async def endpoint():
        raise KeyError("secret-column")

    with pytest.raises(HTTPException) as exc_info:
        await endpoint()

    assert exc_info.value.status_code == 500
    assert "secret-column" not in exc_info.value.detail


@pytest.mark.asyncio
async def test_decorator_passes_http_exceptions_through():
    @handle_workflow_errors
    async def endpoint():
        raise HTTPException(status_code=418, detail="teapot")

    with pytest.raises(HTTPException) as exc_info:
        await endpoint()

    assert exc_info.value.status_code == 418


@pytest.mark.asyncio
async def test_decorator_preserves_return_value():
    @handle_workflow_errors
    async def endpoint(value):
        return value * 2

    assert await endpoint(21) == 42
