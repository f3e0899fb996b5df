"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database session, user/caller factories, storage mocks,
event publisher, bearer token helper
Dependencies: pytest, sqlalchemy, aiosqlite, python-jose
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from signflow.boundary.db.base import Base
    import signflow.boundary.db.models  # noqa: F401

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def user_factory(test_async_db):
    """
    Create users directly through the CRUD layer.

    Returns:
        Callable: async (email, role=SENDER, first_name="", last_name="") -> UserModel
    """
    from signflow.boundary.db.CRUD import user_crud
    from signflow.boundary.db.models import UserRole

    async def _create(
        email: str,
        role: UserRole = UserRole.SENDER,
        first_name: str = "",
        last_name: str = "",
    ):
        user = await user_crud.create(
            test_async_db,
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        await test_async_db.commit()
        return user

    return _create


@pytest.fixture
def caller_for():
    """
    Build a workflow Caller from a user row.

    Returns:
        Callable: (UserModel) -> Caller
    """
    from signflow.core.workflow.policy import Caller

    def _build(user):
        return Caller(user_id=user.id, role=user.role, email=user.email)

    return _build


@pytest.fixture
async def sender(user_factory):
    """Sender who owns the documents under test."""
    return await user_factory("alice@example.com", first_name="Alice", last_name="Sender")


@pytest.fixture
async def other_sender(user_factory):
    """Sender who owns nothing under test."""
    return await user_factory("mallory@example.com", first_name="Mallory")


@pytest.fixture
async def admin(user_factory):
    """Administrator."""
    from signflow.boundary.db.models import UserRole

    return await user_factory("root@example.com", role=UserRole.ADMIN)


@pytest.fixture
def publisher():
    """Real event publisher; tests inspect its queue."""
    from signflow.application.services import EventPublisher

    return EventPublisher()


@pytest.fixture
def mock_storage():
    """
    Create mock S3DocumentClient for testing.

    Returns:
        MagicMock: put/get/delete are AsyncMocks, presigning is synchronous
    """
    from signflow.boundary.aws.s3_client import S3DocumentClient

    storage = MagicMock(spec=S3DocumentClient)
    storage.put.return_value = "https://signflow-test.s3.us-east-1.amazonaws.com/documents/file.pdf"
    storage.generate_presigned_download_url.return_value = (
        "https://signflow-test.s3.amazonaws.com/documents/file.pdf?X-Amz-Signature=abc",
        datetime.now(timezone.utc) + timedelta(hours=1),
    )
    return storage


@pytest.fixture
def workflow_service(test_async_db, mock_storage, publisher):
    """WorkflowService bound to the test session."""
    from signflow.application.services import WorkflowService

    return WorkflowService(db=test_async_db, storage=mock_storage, publisher=publisher)


@pytest.fixture
def draft_document(workflow_service, sender, caller_for):
    """
    Factory creating DRAFT documents owned by the sender fixture.

    Returns:
        Callable: async (title="Lease agreement") -> DocumentModel
    """

    async def _create(title: str = "Lease agreement", description: str | None = None):
        return await workflow_service.create_document(
            caller_for(sender),
            title=title,
            storage_key=f"documents/{uuid.uuid4()}-lease.pdf",
            description=description,
            original_filename="lease.pdf",
            file_size=1024,
        )

    return _create


def drain_events(publisher) -> list:
    """Pop every queued event off a publisher."""
    events = []
    while not publisher.queue.empty():
        events.append(publisher.queue.get_nowait())
    return events


@pytest.fixture
def published_events(publisher):
    """
    Snapshot of published events.

    Returns:
        Callable: () -> list[DocumentEvent], draining the queue
    """
    return lambda: drain_events(publisher)


@pytest.fixture
def make_token():
    """
    Sign access tokens with the default auth settings.

    Returns:
        Callable: (subject, expires_in=300, secret=None) -> str
    """
    from jose import jwt
    from signflow.configs.auth import AuthSettings

    settings = AuthSettings()

    def _sign(subject, expires_in: int = 300, secret: str | None = None) -> str:
        claims = {
            "sub": str(subject),
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
        return jwt.encode(claims, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)

    return _sign
