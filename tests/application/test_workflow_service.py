"""
Test suite for WorkflowService.

Exercises the signature workflow against an in-memory SQLite database:
field editing, sending, signing, completion, access rules and uploads.
Object storage is mocked; events go through a real EventPublisher.

System role: Verification of the signature workflow engine
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from signflow.application.services import WorkflowService
from signflow.application.services.workflow_service import is_transient_db_error
from signflow.boundary.db.CRUD import document_crud, signature_crud, user_crud
from signflow.boundary.db.models import (
    DocumentStatus,
    FieldType,
    SignatureStatus,
    UserRole,
)
from signflow.configs.s3_documents import S3DocumentsSettings
from signflow.core.exceptions import (
    ConflictError,
    DocumentNotFoundError,
    ForbiddenError,
    InvalidStateError,
    SignatureNotFoundError,
    StorageError,
    ValidationError,
)
from signflow.core.workflow.policy import Caller
from signflow.models.events import DocumentEventType
from signflow.models.field import FieldInput
from signflow.models.signature import SignerInput


async def _caller_by_email(db, email: str) -> Caller:
    user = await user_crud.get_by_email(db, email)
    return Caller(user_id=user.id, role=user.role, email=user.email)


async def _status(db, document_id) -> DocumentStatus:
    document = await document_crud.get_by_id(db, document_id)
    return document.status


async def _stored_fields(db, document_id) -> list:
    return list((await document_crud.get_with_details(db, document_id)).fields)


async def _stored_signatures(db, document_id) -> list:
    return list((await document_crud.get_with_details(db, document_id)).signatures)


def _fields(*specs) -> list[FieldInput]:
    return [FieldInput(field_type=field_type, label=label) for field_type, label in specs]


class TestCreateDocument:
    """Test suite for WorkflowService.create_document()."""

    @pytest.mark.asyncio
    async def test_create_document_should_start_as_draft(
        self, workflow_service, sender, caller_for
    ) -> None:
        # Act
        document = await workflow_service.create_document(
            caller_for(sender), title="  NDA  ", storage_key="documents/nda.pdf"
        )

        # Assert
        assert document.status == DocumentStatus.DRAFT
        assert document.title == "NDA"
        assert document.sender_id == sender.id
        assert document.sent_at is None
        assert document.completed_at is None
        assert document.sender.email == "alice@example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title,storage_key", [("", "documents/a.pdf"), ("NDA", "   ")])
    async def test_create_document_should_reject_blank_inputs(
        self, workflow_service, sender, caller_for, test_async_db, title, storage_key
    ) -> None:
        # Act / Assert
        with pytest.raises(ValidationError):
            await workflow_service.create_document(
                caller_for(sender), title=title, storage_key=storage_key
            )
        assert await document_crud.list_documents(test_async_db) == []


class TestReplaceFields:
    """Test suite for WorkflowService.replace_fields()."""

    @pytest.mark.asyncio
    async def test_replace_fields_should_store_fields_in_order(
        self, workflow_service, draft_document, sender, caller_for
    ) -> None:
        # Arrange
        document = await draft_document()
        fields = [
            FieldInput(field_type="signature", label="Tenant", signer_email="Bob@Example.com"),
            FieldInput(field_type="DATE", label="Date", required=False, page=2),
        ]

        # Act
        stored = await workflow_service.replace_fields(document.id, caller_for(sender), fields)

        # Assert
        assert [f.field_type for f in stored] == [FieldType.SIGNATURE, FieldType.DATE]
        assert [f.position for f in stored] == [0, 1]
        assert stored[0].signer_email == "bob@example.com"
        assert stored[1].required is False
        assert stored[1].page == 2

    @pytest.mark.asyncio
    async def test_replace_fields_should_discard_the_previous_set(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        caller = caller_for(sender)
        await workflow_service.replace_fields(
            document.id, caller, _fields(("TEXT", "Name"), ("TEXT", "Address"))
        )

        # Act
        await workflow_service.replace_fields(document.id, caller, _fields(("INITIAL", "Initials")))

        # Assert
        remaining = await _stored_fields(test_async_db, document.id)
        assert [f.label for f in remaining] == ["Initials"]

    @pytest.mark.asyncio
    async def test_replace_fields_with_empty_list_should_clear_fields(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        caller = caller_for(sender)
        await workflow_service.replace_fields(document.id, caller, _fields(("TEXT", "Name")))

        # Act
        await workflow_service.replace_fields(document.id, caller, [])

        # Assert
        assert await _stored_fields(test_async_db, document.id) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad_field",
        [
            FieldInput(field_type="STAMP", label="Stamp"),
            FieldInput(field_type="TEXT", label="   "),
        ],
    )
    async def test_invalid_field_should_leave_previous_set_intact(
        self, workflow_service, draft_document, sender, caller_for, test_async_db, bad_field
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        caller = caller_for(sender)
        await workflow_service.replace_fields(document_id, caller, _fields(("TEXT", "Name")))

        # Act / Assert
        with pytest.raises(ValidationError) as exc_info:
            await workflow_service.replace_fields(
                document_id, caller, [FieldInput(field_type="DATE", label="Date"), bad_field]
            )
        assert exc_info.value.details["field"].startswith("fields[1]")
        remaining = await _stored_fields(test_async_db, document_id)
        assert [f.label for f in remaining] == ["Name"]

    @pytest.mark.asyncio
    async def test_replace_fields_should_fail_once_sent(
        self, workflow_service, draft_document, sender, caller_for
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        caller = caller_for(sender)
        await workflow_service.send_document(
            document_id, caller, [SignerInput(email="bob@example.com")]
        )

        # Act / Assert
        with pytest.raises(InvalidStateError):
            await workflow_service.replace_fields(document_id, caller, _fields(("TEXT", "Late")))

    @pytest.mark.asyncio
    async def test_replace_fields_should_forbid_other_senders(
        self, workflow_service, draft_document, other_sender, caller_for
    ) -> None:
        # Arrange
        document = await draft_document()
        intruder = caller_for(other_sender)

        # Act / Assert
        with pytest.raises(ForbiddenError):
            await workflow_service.replace_fields(document.id, intruder, _fields(("TEXT", "X")))

    @pytest.mark.asyncio
    async def test_admin_should_replace_fields_of_any_draft(
        self, workflow_service, draft_document, admin, caller_for
    ) -> None:
        # Arrange
        document = await draft_document()

        # Act
        stored = await workflow_service.replace_fields(
            document.id, caller_for(admin), _fields(("SIGNATURE", "Landlord"))
        )

        # Assert
        assert len(stored) == 1

    @pytest.mark.asyncio
    async def test_replace_fields_should_raise_for_unknown_document(
        self, workflow_service, sender, caller_for
    ) -> None:
        with pytest.raises(DocumentNotFoundError):
            await workflow_service.replace_fields(uuid.uuid4(), caller_for(sender), [])


class TestSendDocument:
    """Test suite for WorkflowService.send_document()."""

    @pytest.mark.asyncio
    async def test_first_send_should_move_draft_to_sent_and_provision_signers(
        self, workflow_service, draft_document, sender, caller_for, test_async_db, published_events
    ) -> None:
        # Arrange
        document = await draft_document()

        # Act
        signatures = await workflow_service.send_document(
            document.id,
            caller_for(sender),
            [SignerInput(email="Bob@Example.com", name="Bob Signer")],
        )

        # Assert
        assert len(signatures) == 1
        assert signatures[0].status == SignatureStatus.PENDING
        assert signatures[0].signer_email == "bob@example.com"
        assert signatures[0].signer_name == "Bob Signer"

        bob = await user_crud.get_by_email(test_async_db, "bob@example.com")
        assert bob.role == UserRole.SIGNER
        assert bob.password_hash is None
        assert (bob.first_name, bob.last_name) == ("Bob", "Signer")
        assert signatures[0].signer_id == bob.id

        stored = await document_crud.get_by_id(test_async_db, document.id)
        assert stored.status == DocumentStatus.SENT
        assert stored.sent_at is not None

        events = published_events()
        assert [e.event for e in events] == [DocumentEventType.SENT]
        assert events[0].document_id == str(document.id)
        assert events[0].data["signers"] == ["bob@example.com"]

    @pytest.mark.asyncio
    async def test_send_should_reuse_existing_user_case_insensitively(
        self, workflow_service, draft_document, sender, caller_for, user_factory
    ) -> None:
        # Arrange
        carol = await user_factory("carol@example.com", first_name="Carol")
        document = await draft_document()

        # Act
        signatures = await workflow_service.send_document(
            document.id, caller_for(sender), [SignerInput(email="CAROL@example.com")]
        )

        # Assert
        assert signatures[0].signer_id == carol.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "signers",
        [
            [],
            [SignerInput(email="not-an-email")],
            [SignerInput(email="bob@example.com"), SignerInput(email="BOB@example.com")],
        ],
    )
    async def test_send_should_reject_bad_signer_lists(
        self, workflow_service, draft_document, sender, caller_for, test_async_db, signers
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id

        # Act / Assert
        with pytest.raises(ValidationError):
            await workflow_service.send_document(document_id, caller_for(sender), signers)
        assert await _stored_signatures(test_async_db, document_id) == []
        assert await _status(test_async_db, document_id) == DocumentStatus.DRAFT

    @pytest.mark.asyncio
    async def test_send_should_forbid_other_senders(
        self, workflow_service, draft_document, other_sender, caller_for
    ) -> None:
        # Arrange
        document = await draft_document()

        # Act / Assert
        with pytest.raises(ForbiddenError):
            await workflow_service.send_document(
                document.id, caller_for(other_sender), [SignerInput(email="bob@example.com")]
            )

    @pytest.mark.asyncio
    async def test_send_should_raise_for_unknown_document(
        self, workflow_service, sender, caller_for
    ) -> None:
        with pytest.raises(DocumentNotFoundError):
            await workflow_service.send_document(
                uuid.uuid4(), caller_for(sender), [SignerInput(email="bob@example.com")]
            )

    @pytest.mark.asyncio
    async def test_resend_to_already_invited_signer_should_fail(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        caller = caller_for(sender)
        await workflow_service.send_document(
            document_id, caller, [SignerInput(email="bob@example.com")]
        )

        # Act / Assert
        with pytest.raises(ValidationError):
            await workflow_service.send_document(
                document_id,
                caller,
                [SignerInput(email="carol@example.com"), SignerInput(email="bob@example.com")],
            )
        signatures = await _stored_signatures(test_async_db, document_id)
        assert [s.signer_email for s in signatures] == ["bob@example.com"]
        assert await user_crud.get_by_email(test_async_db, "carol@example.com") is None

    @pytest.mark.asyncio
    async def test_resend_without_signatures_should_keep_sent_and_first_sent_at(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        caller = caller_for(sender)
        await workflow_service.send_document(
            document.id, caller, [SignerInput(email="bob@example.com")]
        )
        first_sent_at = (await document_crud.get_by_id(test_async_db, document.id)).sent_at

        # Act
        await workflow_service.send_document(
            document.id, caller, [SignerInput(email="carol@example.com")]
        )

        # Assert
        stored = await document_crud.get_by_id(test_async_db, document.id)
        assert stored.status == DocumentStatus.SENT
        assert stored.sent_at == first_sent_at
        assert await signature_crud.count_pending(test_async_db, document.id) == 2

    @pytest.mark.asyncio
    async def test_send_should_fail_for_completed_document(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        caller = caller_for(sender)
        await workflow_service.send_document(
            document_id, caller, [SignerInput(email="bob@example.com")]
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")
        await workflow_service.sign_document(document_id, bob, "data:image/png;base64,AAAA")

        # Act / Assert
        with pytest.raises(InvalidStateError):
            await workflow_service.send_document(
                document_id, caller, [SignerInput(email="carol@example.com")]
            )
        assert await _status(test_async_db, document_id) == DocumentStatus.COMPLETED


class TestSignDocument:
    """Test suite for WorkflowService.sign_document()."""

    @pytest.mark.asyncio
    async def test_single_signer_should_complete_document(
        self, workflow_service, draft_document, sender, caller_for, test_async_db, published_events
    ) -> None:
        # Arrange
        document = await draft_document()
        await workflow_service.send_document(
            document.id, caller_for(sender), [SignerInput(email="bob@example.com")]
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")

        # Act
        signature = await workflow_service.sign_document(
            document.id, bob, "sig-bytes", ip_address="203.0.113.7", user_agent="pytest"
        )

        # Assert
        assert signature.status == SignatureStatus.SIGNED
        assert signature.signed_at is not None
        assert signature.signature_data == "sig-bytes"
        assert signature.ip_address == "203.0.113.7"
        assert signature.user_agent == "pytest"

        stored = await document_crud.get_by_id(test_async_db, document.id)
        assert stored.status == DocumentStatus.COMPLETED
        assert stored.completed_at is not None

        assert [e.event for e in published_events()] == [
            DocumentEventType.SENT,
            DocumentEventType.SIGNED,
            DocumentEventType.COMPLETED,
        ]

    @pytest.mark.asyncio
    async def test_first_of_two_signers_should_move_to_in_progress(
        self, workflow_service, draft_document, sender, caller_for, test_async_db, published_events
    ) -> None:
        # Arrange
        document = await draft_document()
        await workflow_service.send_document(
            document.id,
            caller_for(sender),
            [SignerInput(email="bob@example.com"), SignerInput(email="carol@example.com")],
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")
        carol = await _caller_by_email(test_async_db, "carol@example.com")

        # Act
        await workflow_service.sign_document(document.id, bob, "bob-sig")

        # Assert
        stored = await document_crud.get_by_id(test_async_db, document.id)
        assert stored.status == DocumentStatus.IN_PROGRESS
        assert stored.completed_at is None

        # Act
        await workflow_service.sign_document(document.id, carol, "carol-sig")

        # Assert
        assert await _status(test_async_db, document.id) == DocumentStatus.COMPLETED
        events = [e.event for e in published_events()]
        assert events.count(DocumentEventType.SIGNED) == 2
        assert events.count(DocumentEventType.COMPLETED) == 1
        assert events[-1] == DocumentEventType.COMPLETED

    @pytest.mark.asyncio
    async def test_resend_after_partial_signing_should_require_new_signer(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        caller = caller_for(sender)
        await workflow_service.send_document(
            document.id,
            caller,
            [SignerInput(email="bob@example.com"), SignerInput(email="carol@example.com")],
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")
        carol = await _caller_by_email(test_async_db, "carol@example.com")
        await workflow_service.sign_document(document.id, bob, "bob-sig")

        # Act
        await workflow_service.send_document(
            document.id, caller, [SignerInput(email="dave@example.com")]
        )
        await workflow_service.sign_document(document.id, carol, "carol-sig")

        # Assert
        assert await _status(test_async_db, document.id) == DocumentStatus.IN_PROGRESS

        # Act
        dave = await _caller_by_email(test_async_db, "dave@example.com")
        await workflow_service.sign_document(document.id, dave, "dave-sig")

        # Assert
        assert await _status(test_async_db, document.id) == DocumentStatus.COMPLETED
        assert await signature_crud.count_signed(test_async_db, document.id) == 3

    @pytest.mark.asyncio
    async def test_signing_twice_should_fail(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        await workflow_service.send_document(
            document_id,
            caller_for(sender),
            [SignerInput(email="bob@example.com"), SignerInput(email="carol@example.com")],
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")
        await workflow_service.sign_document(document_id, bob, "bob-sig")

        # Act / Assert
        with pytest.raises(SignatureNotFoundError):
            await workflow_service.sign_document(document_id, bob, "bob-sig-again")
        signature = await signature_crud.get_for_signer(test_async_db, document_id, bob.user_id)
        assert signature.signature_data == "bob-sig"

    @pytest.mark.asyncio
    async def test_uninvited_user_should_not_sign(
        self, workflow_service, draft_document, sender, other_sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        intruder = caller_for(other_sender)
        await workflow_service.send_document(
            document_id, caller_for(sender), [SignerInput(email="bob@example.com")]
        )

        # Act / Assert
        with pytest.raises(SignatureNotFoundError):
            await workflow_service.sign_document(document_id, intruder, "forged")
        assert await _status(test_async_db, document_id) == DocumentStatus.SENT

    @pytest.mark.asyncio
    async def test_signing_a_draft_should_fail(
        self, workflow_service, draft_document, sender, caller_for
    ) -> None:
        # Arrange
        document = await draft_document()

        # Act / Assert
        with pytest.raises(SignatureNotFoundError):
            await workflow_service.sign_document(document.id, caller_for(sender), "sig")

    @pytest.mark.asyncio
    async def test_pending_signature_on_a_draft_should_not_be_signable(
        self, workflow_service, draft_document, user_factory, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        bob = await user_factory("bob@example.com", role=UserRole.SIGNER)
        bob_caller = caller_for(bob)
        await signature_crud.create(
            test_async_db,
            document_id=document_id,
            signer_id=bob.id,
            signer_email=bob.email,
        )
        await test_async_db.commit()

        # Act / Assert
        with pytest.raises(InvalidStateError):
            await workflow_service.sign_document(document_id, bob_caller, "sig")
        signature = await signature_crud.get_for_signer(test_async_db, document_id, bob_caller.user_id)
        assert signature.status == SignatureStatus.PENDING
        assert await _status(test_async_db, document_id) == DocumentStatus.DRAFT

    @pytest.mark.asyncio
    async def test_signing_unknown_document_should_fail(
        self, workflow_service, sender, caller_for
    ) -> None:
        with pytest.raises(DocumentNotFoundError):
            await workflow_service.sign_document(uuid.uuid4(), caller_for(sender), "sig")

    @pytest.mark.asyncio
    async def test_blank_signature_data_should_be_rejected(
        self, workflow_service, sender, caller_for
    ) -> None:
        with pytest.raises(ValidationError):
            await workflow_service.sign_document(uuid.uuid4(), caller_for(sender), "   ")

    @pytest.mark.asyncio
    async def test_transient_database_error_should_be_retried(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        await workflow_service.send_document(
            document_id, caller_for(sender), [SignerInput(email="bob@example.com")]
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")
        real_sign_if_pending = workflow_service.repository.sign_if_pending
        attempts = []

        async def _flaky_sign_if_pending(*args, **kwargs):
            attempts.append(args)
            if len(attempts) == 1:
                raise OperationalError("UPDATE signatures", {}, Exception("database is locked"))
            return await real_sign_if_pending(*args, **kwargs)

        workflow_service.repository.sign_if_pending = _flaky_sign_if_pending

        # Act
        signature = await workflow_service.sign_document(document_id, bob, "bob-sig")

        # Assert
        assert signature.status == SignatureStatus.SIGNED
        assert len(attempts) == 2
        assert await _status(test_async_db, document_id) == DocumentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_persistent_database_conflict_should_raise_conflict(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        document_id = document.id
        await workflow_service.send_document(
            document_id, caller_for(sender), [SignerInput(email="bob@example.com")]
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")
        workflow_service.repository.sign_if_pending = AsyncMock(
            side_effect=OperationalError("UPDATE signatures", {}, Exception("database is locked"))
        )

        # Act / Assert
        with pytest.raises(ConflictError):
            await workflow_service.sign_document(document_id, bob, "bob-sig")
        assert await _status(test_async_db, document_id) == DocumentStatus.SENT

    @pytest.mark.asyncio
    async def test_publisher_failure_should_not_fail_signing(
        self, test_async_db, mock_storage, draft_document, sender, caller_for, workflow_service
    ) -> None:
        # Arrange
        document = await draft_document()
        await workflow_service.send_document(
            document.id, caller_for(sender), [SignerInput(email="bob@example.com")]
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")
        broken_publisher = MagicMock()
        broken_publisher.publish.side_effect = RuntimeError("queue gone")
        service = WorkflowService(db=test_async_db, storage=mock_storage, publisher=broken_publisher)

        # Act
        signature = await service.sign_document(document.id, bob, "bob-sig")

        # Assert
        assert signature.status == SignatureStatus.SIGNED


class TestTransientErrorClassification:
    """Test suite for is_transient_db_error()."""

    def test_operational_error_should_be_transient(self) -> None:
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))
        assert is_transient_db_error(error)

    def test_serialization_failure_should_be_transient(self) -> None:
        from sqlalchemy.exc import DBAPIError

        class _Orig(Exception):
            sqlstate = "40001"

        assert is_transient_db_error(DBAPIError("UPDATE", {}, _Orig("could not serialize")))

    def test_other_errors_should_not_be_transient(self) -> None:
        from sqlalchemy.exc import IntegrityError

        class _Orig(Exception):
            sqlstate = "23505"

        assert not is_transient_db_error(IntegrityError("INSERT", {}, _Orig("duplicate")))
        assert not is_transient_db_error(ValueError("nope"))


class TestReads:
    """Test suite for document reads and listing."""

    @pytest.mark.asyncio
    async def test_get_document_should_allow_sender_signer_and_admin(
        self, workflow_service, draft_document, sender, admin, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        await workflow_service.replace_fields(
            document.id, caller_for(sender), _fields(("SIGNATURE", "Tenant"))
        )
        await workflow_service.send_document(
            document.id, caller_for(sender), [SignerInput(email="bob@example.com")]
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")

        # Act
        for caller in (caller_for(sender), bob, caller_for(admin)):
            details = await workflow_service.get_document(document.id, caller)

            # Assert
            assert details.document.id == document.id
            assert [f.label for f in details.document.fields] == ["Tenant"]
            assert [s.signer_email for s in details.document.signatures] == ["bob@example.com"]
            assert details.analysis is None

    @pytest.mark.asyncio
    async def test_get_document_should_forbid_unrelated_users(
        self, workflow_service, draft_document, other_sender, caller_for
    ) -> None:
        # Arrange
        document = await draft_document()

        # Act / Assert
        with pytest.raises(ForbiddenError):
            await workflow_service.get_document(document.id, caller_for(other_sender))

    @pytest.mark.asyncio
    async def test_get_document_should_raise_for_unknown_document(
        self, workflow_service, sender, caller_for
    ) -> None:
        with pytest.raises(DocumentNotFoundError):
            await workflow_service.get_document(uuid.uuid4(), caller_for(sender))

    @pytest.mark.asyncio
    async def test_list_documents_should_scope_by_role(
        self, workflow_service, draft_document, sender, other_sender, admin, caller_for, test_async_db
    ) -> None:
        # Arrange
        first = await draft_document("First")
        second = await draft_document("Second")
        await workflow_service.create_document(
            caller_for(other_sender), title="Other", storage_key="documents/other.pdf"
        )
        await workflow_service.send_document(
            first.id, caller_for(sender), [SignerInput(email="bob@example.com")]
        )
        bob = await _caller_by_email(test_async_db, "bob@example.com")

        # Act
        own = await workflow_service.list_documents(caller_for(sender))
        everything = await workflow_service.list_documents(caller_for(admin))
        as_signer = await workflow_service.list_documents(bob)

        # Assert
        assert {d.id for d in own} == {first.id, second.id}
        assert len(everything) == 3
        assert as_signer == []

    @pytest.mark.asyncio
    async def test_list_documents_should_reflect_latest_status(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        caller = caller_for(sender)
        await workflow_service.list_documents(caller)
        await workflow_service.send_document(
            document.id, caller, [SignerInput(email="bob@example.com")]
        )

        # Act
        listed = await workflow_service.list_documents(caller)

        # Assert
        assert listed[0].status == DocumentStatus.SENT

    @pytest.mark.asyncio
    async def test_list_signing_requests_should_return_own_signature(
        self, workflow_service, draft_document, sender, caller_for, test_async_db
    ) -> None:
        # Arrange
        document = await draft_document()
        await workflow_service.send_document(
            document.id,
            caller_for(sender),
            [SignerInput(email="bob@example.com"), SignerInput(email="carol@example.com")],
        )
        carol = await _caller_by_email(test_async_db, "carol@example.com")

        # Act
        requests = await workflow_service.list_signing_requests(carol)

        # Assert
        assert len(requests) == 1
        assert requests[0].document.id == document.id
        assert requests[0].signature.signer_email == "carol@example.com"
        assert requests[0].signature.status == SignatureStatus.PENDING

    @pytest.mark.asyncio
    async def test_get_download_url_should_presign_storage_key(
        self, workflow_service, draft_document, sender, caller_for, mock_storage
    ) -> None:
        # Arrange
        document = await draft_document()

        # Act
        url, expires_at = await workflow_service.get_download_url(document.id, caller_for(sender))

        # Assert
        assert url.startswith("https://")
        assert expires_at is not None
        mock_storage.generate_presigned_download_url.assert_called_once_with(
            document.storage_key, expires_in=3600
        )

    @pytest.mark.asyncio
    async def test_get_download_url_should_forbid_unrelated_users(
        self, workflow_service, draft_document, other_sender, caller_for, mock_storage
    ) -> None:
        # Arrange
        document = await draft_document()

        # Act / Assert
        with pytest.raises(ForbiddenError):
            await workflow_service.get_download_url(document.id, caller_for(other_sender))
        mock_storage.generate_presigned_download_url.assert_not_called()


class TestUploadDocument:
    """Test suite for WorkflowService.upload_document()."""

    @pytest.mark.asyncio
    async def test_upload_should_store_file_and_create_draft(
        self, workflow_service, sender, caller_for, mock_storage
    ) -> None:
        # Act
        document = await workflow_service.upload_document(
            caller_for(sender),
            title="Lease",
            filename="lease.pdf",
            content=b"%PDF-1.4 lease",
            content_type="application/pdf",
        )

        # Assert
        assert document.status == DocumentStatus.DRAFT
        assert document.storage_key.startswith("documents/")
        assert document.storage_key.endswith("-lease.pdf")
        assert document.file_url == mock_storage.put.return_value
        assert document.file_size == len(b"%PDF-1.4 lease")
        assert document.original_filename == "lease.pdf"
        mock_storage.put.assert_awaited_once_with(
            b"%PDF-1.4 lease", document.storage_key, "application/pdf"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content,content_type",
        [
            (b"MZ\x90\x00", "application/x-msdownload"),
            (b"", "application/pdf"),
        ],
    )
    async def test_upload_should_reject_bad_files_before_storing(
        self, workflow_service, sender, caller_for, mock_storage, content, content_type
    ) -> None:
        # Act / Assert
        with pytest.raises(ValidationError):
            await workflow_service.upload_document(
                caller_for(sender),
                title="Bad",
                filename="bad.bin",
                content=content,
                content_type=content_type,
            )
        mock_storage.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upload_should_reject_oversized_files(
        self, test_async_db, sender, caller_for, mock_storage
    ) -> None:
        # Arrange
        service = WorkflowService(
            db=test_async_db,
            storage=mock_storage,
            storage_settings=S3DocumentsSettings(max_upload_bytes=8),
        )

        # Act / Assert
        with pytest.raises(ValidationError):
            await service.upload_document(
                caller_for(sender),
                title="Big",
                filename="big.pdf",
                content=b"0123456789",
                content_type="application/pdf",
            )
        mock_storage.put.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_failure_should_not_create_document(
        self, workflow_service, sender, caller_for, mock_storage, test_async_db
    ) -> None:
        # Arrange
        caller = caller_for(sender)
        mock_storage.put.side_effect = StorageError("S3 unavailable", operation="put")

        # Act / Assert
        with pytest.raises(StorageError):
            await workflow_service.upload_document(
                caller,
                title="Lease",
                filename="lease.pdf",
                content=b"%PDF",
                content_type="application/pdf",
            )
        assert await document_crud.list_documents(test_async_db) == []

    @pytest.mark.asyncio
    async def test_database_failure_should_remove_stored_object(
        self, workflow_service, sender, caller_for, mock_storage
    ) -> None:
        # Arrange
        caller = caller_for(sender)
        workflow_service.repository.create_document = AsyncMock(side_effect=RuntimeError("db down"))

        # Act / Assert
        with pytest.raises(RuntimeError):
            await workflow_service.upload_document(
                caller,
                title="Lease",
                filename="lease.pdf",
                content=b"%PDF",
                content_type="application/pdf",
            )
        stored_key = mock_storage.put.await_args.args[1]
        mock_storage.delete.assert_awaited_once_with(stored_key)
