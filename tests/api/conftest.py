"""
API test fixtures.

Services are replaced through dependency_overrides; the caller is injected
directly so no token or database is needed. ORM rows are built transient,
never attached to a session.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from signflow.api.deps import (
    get_ai_service,
    get_current_caller,
    get_template_service,
    get_workflow_service,
)
from signflow.boundary.db import get_async_db
from signflow.boundary.db.models import (
    DocumentModel,
    DocumentStatus,
    SignatureModel,
    SignatureStatus,
    UserModel,
    UserRole,
)
from signflow.core.workflow.policy import Caller
from signflow.main import create_app


@pytest.fixture
def caller() -> Caller:
    return Caller(user_id=uuid.uuid4(), role=UserRole.SENDER, email="alice@example.com")


@pytest.fixture
def mock_workflow_service():
    return AsyncMock()


@pytest.fixture
def mock_ai_service():
    return AsyncMock()


@pytest.fixture
def mock_template_service():
    return AsyncMock()


@pytest.fixture
def app(caller, mock_workflow_service, mock_ai_service, mock_template_service):
    app = create_app()
    app.dependency_overrides[get_current_caller] = lambda: caller
    app.dependency_overrides[get_workflow_service] = lambda: mock_workflow_service
    app.dependency_overrides[get_ai_service] = lambda: mock_ai_service
    app.dependency_overrides[get_template_service] = lambda: mock_template_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def unauthenticated_client():
    """Client that runs the real bearer-token dependency against a stub session."""

    async def _no_db():
        yield AsyncMock()

    app = create_app()
    app.dependency_overrides[get_async_db] = _no_db
    app.dependency_overrides[get_workflow_service] = lambda: AsyncMock()
    return TestClient(app)


@pytest.fixture
def make_document(caller):
    """
    Build a transient DocumentModel with sender and signatures.

    Returns:
        Callable: (status=DRAFT, signatures=()) -> DocumentModel
    """

    def _build(status: DocumentStatus = DocumentStatus.DRAFT, signatures=()):
        now = datetime.now(timezone.utc)
        document = DocumentModel(
            id=uuid.uuid4(),
            sender_id=caller.user_id,
            title="Lease agreement",
            description=None,
            original_filename="lease.pdf",
            storage_key="documents/lease.pdf",
            file_url="https://signflow-test.s3.us-east-1.amazonaws.com/documents/lease.pdf",
            file_size=1024,
            mime_type="application/pdf",
            status=status,
            created_at=now,
            updated_at=now,
        )
        document.sender = UserModel(
            id=caller.user_id,
            email=caller.email,
            first_name="Alice",
            last_name="Sender",
            role=UserRole.SENDER,
        )
        document.fields = []
        document.signatures = list(signatures)
        return document

    return _build


@pytest.fixture
def make_signature():
    """
    Build a transient SignatureModel.

    Returns:
        Callable: (document_id, email, status=PENDING) -> SignatureModel
    """

    def _build(document_id, email: str = "bob@example.com", status=SignatureStatus.PENDING):
        now = datetime.now(timezone.utc)
        return SignatureModel(
            id=uuid.uuid4(),
            document_id=document_id,
            signer_id=uuid.uuid4(),
            signer_email=email,
            signer_name="",
            status=status,
            signed_at=now if status == SignatureStatus.SIGNED else None,
            created_at=now,
            updated_at=now,
        )

    return _build
