"""
Signature workflow service.

Enforces the document state machine: field editing while DRAFT, sending to
signers, signing, and completion detection. Every mutating operation runs
in one transaction on the request's session; events are published only
after that transaction committed.

Completion is linearizable: a signer first flips their own signature with a
conditional UPDATE (exactly one concurrent caller can win it), then takes
the document row lock and counts what is still PENDING. The COMPLETED
update is itself guarded, so a document completes exactly once.

Dependencies: sqlalchemy, tenacity, email_validator, signflow.boundary,
signflow.core.workflow
System role: Signature workflow use case orchestration
"""

import logging
from dataclasses import dataclass
from typing import Sequence
from uuid import UUID, uuid4

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_random,
)

from signflow.boundary.aws.s3_client import S3DocumentClient
from signflow.boundary.db.base import utcnow
from signflow.boundary.db.models import (
    AIAnalysisModel,
    DocumentFieldModel,
    DocumentModel,
    DocumentStatus,
    FieldType,
    SignatureModel,
    SignatureStatus,
)
from signflow.boundary.db.repository import DocumentRepository
from signflow.configs.s3_documents import S3DocumentsSettings
from signflow.core.exceptions import (
    ConflictError,
    DocumentNotFoundError,
    ForbiddenError,
    InvalidStateError,
    SignatureNotFoundError,
    ValidationError,
)
from signflow.core.workflow import policy, state_machine
from signflow.core.workflow.policy import Caller
from signflow.models.events import DocumentEvent, DocumentEventType
from signflow.models.field import FieldInput
from signflow.models.signature import SignerInput
from signflow.observability.log_utils import describe_payload

from .notification_service import EventPublisher
from .signer_resolver import SignerResolver

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected
_TRANSIENT_SQLSTATES = {"40001", "40P01"}
SIGN_MAX_ATTEMPTS = 5


def is_transient_db_error(error: BaseException) -> bool:
    """True for lock contention, deadlocks and serialization failures."""
    if isinstance(error, OperationalError):
        return True
    if isinstance(error, DBAPIError):
        orig = error.orig
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        return code in _TRANSIENT_SQLSTATES
    return False


@dataclass
class DocumentDetails:
    """A document with its latest analysis."""

    document: DocumentModel
    analysis: AIAnalysisModel | None


@dataclass
class SigningRequest:
    """A document the caller was invited to sign and their own signature."""

    document: DocumentModel
    signature: SignatureModel


class WorkflowService:
    """Signature workflow engine."""

    def __init__(
        self,
        db: AsyncSession,
        storage: S3DocumentClient | None = None,
        publisher: EventPublisher | None = None,
        storage_settings: S3DocumentsSettings | None = None,
    ) -> None:
        """
        Initialize workflow service.

        Args:
            db: Request-scoped async session owning the transaction
            storage: Storage gateway for uploads and download URLs
            publisher: Event publisher; events are dropped when absent
            storage_settings: Upload limits and URL expiry
        """
        self.db = db
        self.repository = DocumentRepository(db)
        self.signer_resolver = SignerResolver(self.repository)
        self.storage = storage
        self.publisher = publisher
        self.storage_settings = storage_settings or S3DocumentsSettings()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _publish(self, event_type: DocumentEventType, document_id: UUID, **data) -> None:
        if self.publisher is None:
            return
        try:
            self.publisher.publish(
                DocumentEvent(event=event_type, document_id=str(document_id), data=data)
            )
        except Exception as e:
            logger.error(
                f"{__name__}:_publish - {type(e).__name__}: {e}",
                extra={"document_id": str(document_id), "event": event_type.value},
            )

    async def _get_managed_document(
        self,
        document_id: UUID,
        caller: Caller,
        lock: bool = False,
    ) -> DocumentModel:
        if lock:
            document = await self.repository.lock_document(document_id)
        else:
            document = await self.repository.get_document(document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        if not policy.can_manage(caller, document.sender_id):
            raise ForbiddenError(
                "Only the sender or an administrator may modify this document",
                user_id=str(caller.user_id),
                document_id=str(document_id),
            )
        return document

    async def _get_viewable_document(self, document_id: UUID, caller: Caller) -> DocumentModel:
        document = await self.repository.get_document_details(document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        signer_ids = (signature.signer_id for signature in document.signatures)
        if not policy.can_view(caller, document.sender_id, signer_ids):
            raise ForbiddenError(
                user_id=str(caller.user_id),
                document_id=str(document_id),
            )
        return document

    @staticmethod
    def _validate_fields(fields: Sequence[FieldInput]) -> list[dict]:
        allowed = {field_type.value for field_type in FieldType}
        rows = []
        for index, field in enumerate(fields):
            field_type = (field.field_type or "").strip().upper()
            if field_type not in allowed:
                raise ValidationError(
                    f"Invalid field type: {field.field_type!r}",
                    field=f"fields[{index}].field_type",
                )
            label = (field.label or "").strip()
            if not label:
                raise ValidationError(
                    "Field label is required",
                    field=f"fields[{index}].label",
                )
            rows.append({
                "field_type": FieldType(field_type),
                "label": label,
                "required": field.required,
                "page": field.page,
                "x": field.x,
                "y": field.y,
                "width": field.width,
                "height": field.height,
                "signer_email": field.signer_email.strip().lower() if field.signer_email else None,
            })
        return rows

    @staticmethod
    def _validate_signers(signers: Sequence[SignerInput]) -> list[tuple[str, str]]:
        if not signers:
            raise ValidationError("At least one signer is required", field="signers")
        seen: set[str] = set()
        normalized = []
        for index, signer in enumerate(signers):
            try:
                email = validate_email(
                    (signer.email or "").strip(), check_deliverability=False
                ).normalized.lower()
            except EmailNotValidError as e:
                raise ValidationError(
                    f"Invalid signer email: {signer.email!r}",
                    field=f"signers[{index}].email",
                ) from e
            if email in seen:
                raise ValidationError(
                    f"Duplicate signer email: {email}",
                    field=f"signers[{index}].email",
                )
            seen.add(email)
            normalized.append((email, (signer.name or "").strip()))
        return normalized

    # ------------------------------------------------------------------ #
    # Document creation
    # ------------------------------------------------------------------ #

    async def create_document(
        self,
        caller: Caller,
        title: str,
        storage_key: str,
        description: str | None = None,
        file_url: str | None = None,
        original_filename: str = "",
        file_size: int = 0,
        mime_type: str = "application/pdf",
    ) -> DocumentModel:
        """
        Register a stored file as a new DRAFT document owned by the caller.

        Args:
            caller: Authenticated sender
            title: Document title (non-blank)
            storage_key: Object key of the stored file (non-blank)
            description: Optional free text
            file_url: Object URL
            original_filename: Filename as uploaded
            file_size: Size in bytes
            mime_type: Content type

        Returns:
            DocumentModel: Created document in DRAFT

        Raises:
            ValidationError: If title or storage_key is blank
        """
        if not title or not title.strip():
            raise ValidationError("Title is required", field="title")
        if not storage_key or not storage_key.strip():
            raise ValidationError("Storage reference is required", field="storage_key")

        try:
            document = await self.repository.create_document(
                sender_id=caller.user_id,
                title=title.strip(),
                description=description,
                storage_key=storage_key.strip(),
                file_url=file_url,
                original_filename=original_filename or "",
                file_size=file_size,
                mime_type=mime_type,
                status=DocumentStatus.DRAFT,
            )
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            "Document created",
            extra={"document_id": str(document.id), "sender_id": str(caller.user_id)},
        )
        return await self.repository.get_document_details(document.id)

    async def upload_document(
        self,
        caller: Caller,
        title: str,
        filename: str,
        content: bytes,
        content_type: str,
        description: str | None = None,
    ) -> DocumentModel:
        """
        Store an uploaded file and register it as a DRAFT document.

        Args:
            caller: Authenticated sender
            title: Document title
            filename: Original filename
            content: Raw file bytes
            content_type: MIME type reported by the client
            description: Optional free text

        Returns:
            DocumentModel: Created document in DRAFT

        Raises:
            ValidationError: Blank title, unsupported type, empty or oversized file
            StorageError: If the file could not be stored
        """
        if self.storage is None:
            raise RuntimeError("WorkflowService was created without a storage gateway")
        if not title or not title.strip():
            raise ValidationError("Title is required", field="title")
        if content_type not in self.storage_settings.allowed_content_types:
            raise ValidationError(
                f"Unsupported file type: {content_type}",
                field="file",
                details={"allowed": self.storage_settings.allowed_content_types},
            )
        if not content:
            raise ValidationError("Uploaded file is empty", field="file")
        if len(content) > self.storage_settings.max_upload_bytes:
            raise ValidationError(
                "Uploaded file is too large",
                field="file",
                details={"max_bytes": self.storage_settings.max_upload_bytes},
            )

        filename = (filename or "document").replace("/", "_")
        storage_key = f"documents/{uuid4()}-{filename}"
        file_url = await self.storage.put(content, storage_key, content_type)

        try:
            return await self.create_document(
                caller,
                title=title,
                storage_key=storage_key,
                description=description,
                file_url=file_url,
                original_filename=filename,
                file_size=len(content),
                mime_type=content_type,
            )
        except Exception:
            logger.warning(
                "Document row not created, removing stored object",
                extra={"storage_key": storage_key},
            )
            try:
                await self.storage.delete(storage_key)
            except Exception as cleanup_error:
                logger.error(
                    f"{__name__}:upload_document - Cleanup failed: {cleanup_error}",
                    extra={"storage_key": storage_key},
                )
            raise

    # ------------------------------------------------------------------ #
    # Fields
    # ------------------------------------------------------------------ #

    async def replace_fields(
        self,
        document_id: UUID,
        caller: Caller,
        fields: Sequence[FieldInput],
    ) -> Sequence[DocumentFieldModel]:
        """
        Replace the whole field set of a DRAFT document.

        Args:
            document_id: Document UUID
            caller: Sender or admin
            fields: New field set, in order

        Returns:
            The new field rows in order

        Raises:
            DocumentNotFoundError: Document does not exist
            ForbiddenError: Caller is neither sender nor admin
            InvalidStateError: Document is no longer DRAFT
            ValidationError: A field has an unknown type or blank label
        """
        try:
            document = await self._get_managed_document(document_id, caller, lock=True)
            if not state_machine.can_edit_fields(document.status):
                raise InvalidStateError(
                    "Fields can only be edited while the document is a draft",
                    document_id=str(document_id),
                    status=document.status.value,
                )
            rows = self._validate_fields(fields)
            new_fields = await self.repository.replace_fields(document_id, rows)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            "Document fields replaced",
            extra={"document_id": str(document_id), "field_count": len(new_fields)},
        )
        return new_fields

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    async def send_document(
        self,
        document_id: UUID,
        caller: Caller,
        signers: Sequence[SignerInput],
    ) -> list[SignatureModel]:
        """
        Invite signers and move the document out of DRAFT.

        A first send moves DRAFT to SENT. Sending again appends signatures;
        once anything is signed the document stays IN_PROGRESS.

        Args:
            document_id: Document UUID
            caller: Sender or admin
            signers: Invitees (email, name)

        Returns:
            list[SignatureModel]: Created PENDING signatures

        Raises:
            DocumentNotFoundError: Document does not exist
            ForbiddenError: Caller is neither sender nor admin
            ValidationError: No signers, bad or duplicate email, signer already invited
            InvalidStateError: Document is COMPLETED
            ConflictError: A concurrent request invited the same signer
        """
        try:
            document = await self._get_managed_document(document_id, caller, lock=True)
            invitees = self._validate_signers(signers)
            if not state_machine.can_send(document.status):
                raise InvalidStateError(
                    "A completed document cannot be sent",
                    document_id=str(document_id),
                    status=document.status.value,
                )

            signatures = []
            for email, name in invitees:
                signer_id = await self.signer_resolver.resolve_or_provision(email, name)
                existing = await self.repository.get_signature_for_signer(document_id, signer_id)
                if existing is not None:
                    raise ValidationError(
                        f"Signer already invited: {email}",
                        field="signers",
                        details={"status": existing.status.value},
                    )
                signatures.append(
                    await self.repository.create_signature(
                        document_id=document_id,
                        signer_id=signer_id,
                        signer_email=email,
                        signer_name=name,
                        status=SignatureStatus.PENDING,
                    )
                )

            previous_status = document.status
            signed_count = await self.repository.count_signed_signatures(document_id)
            new_status = state_machine.status_after_send(previous_status, signed_count)
            if new_status != previous_status:
                values = {}
                if previous_status == DocumentStatus.DRAFT:
                    values["sent_at"] = utcnow()
                moved = await self.repository.transition_document(
                    document_id, (previous_status,), new_status, **values
                )
                if not moved:
                    raise ConflictError(
                        "Document changed while sending, retry the request",
                        {"document_id": str(document_id)},
                    )
            await self.repository.commit()
        except IntegrityError as e:
            await self.repository.rollback()
            raise ConflictError(
                "Signer was invited concurrently, retry the request",
                {"document_id": str(document_id)},
            ) from e
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            "Document sent",
            extra={
                "document_id": str(document_id),
                "signer_count": len(signatures),
                "status": new_status.value,
            },
        )
        self._publish(
            DocumentEventType.SENT,
            document_id,
            status=new_status.value,
            signers=[signature.signer_email for signature in signatures],
        )
        return signatures

    # ------------------------------------------------------------------ #
    # Signing
    # ------------------------------------------------------------------ #

    async def _sign_once(
        self,
        document_id: UUID,
        caller: Caller,
        signature_data: str,
        ip_address: str | None,
        user_agent: str | None,
    ) -> tuple[SignatureModel, bool]:
        document = await self.repository.get_document(document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))

        signature = await self.repository.get_signature_for_signer(
            document_id, caller.user_id, status=SignatureStatus.PENDING
        )
        if signature is None:
            raise SignatureNotFoundError(str(document_id), str(caller.user_id))
        if not state_machine.can_sign(document.status):
            raise InvalidStateError(
                "Document is not open for signing",
                document_id=str(document_id),
                status=document.status.value,
            )

        now = utcnow()
        won = await self.repository.sign_if_pending(
            signature.id,
            signed_at=now,
            signature_data=signature_data,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        if not won:
            raise SignatureNotFoundError(str(document_id), str(caller.user_id))

        # Serializes the completion check with other signers of this document
        await self.repository.lock_document(document_id)
        pending = await self.repository.count_pending_signatures(document_id)
        completed = False
        if state_machine.status_after_signing(pending) == DocumentStatus.COMPLETED:
            completed = await self.repository.complete_document(document_id, completed_at=now)
        else:
            await self.repository.transition_document(
                document_id, (DocumentStatus.SENT,), DocumentStatus.IN_PROGRESS
            )
        await self.repository.commit()

        signed = await self.repository.get_signature(signature.id)
        return signed, completed

    async def sign_document(
        self,
        document_id: UUID,
        caller: Caller,
        signature_data: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> SignatureModel:
        """
        Sign the caller's pending signature and complete the document if it was the last.

        Args:
            document_id: Document UUID
            caller: Invited signer
            signature_data: Opaque signature payload (non-blank)
            ip_address: Submitting IP (audit)
            user_agent: Submitting user agent (audit)

        Returns:
            SignatureModel: The signature, now SIGNED

        Raises:
            ValidationError: Blank signature payload
            DocumentNotFoundError: Document does not exist
            SignatureNotFoundError: No PENDING signature for the caller (never invited or already signed)
            InvalidStateError: Document is not SENT or IN_PROGRESS
            ConflictError: Transient database conflicts persisted across retries
        """
        if not signature_data or not signature_data.strip():
            raise ValidationError("Signature data is required", field="signature_data")

        logger.info(
            "Signing document",
            extra={
                "document_id": str(document_id),
                "signer_id": str(caller.user_id),
                "signature_data": describe_payload(signature_data),
            },
        )

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(is_transient_db_error),
                stop=stop_after_attempt(SIGN_MAX_ATTEMPTS),
                wait=wait_random(min=0.01, max=0.2),
                reraise=False,
            ):
                with attempt:
                    try:
                        signature, completed = await self._sign_once(
                            document_id, caller, signature_data, ip_address, user_agent
                        )
                    except Exception:
                        await self.repository.rollback()
                        raise
        except RetryError as e:
            logger.warning(
                "Signing gave up after repeated database conflicts",
                extra={"document_id": str(document_id), "signer_id": str(caller.user_id)},
            )
            raise ConflictError(
                "Could not record signature due to concurrent updates, retry the request",
                {"document_id": str(document_id)},
            ) from e.last_attempt.exception()

        logger.info(
            "Document signed",
            extra={
                "document_id": str(document_id),
                "signature_id": str(signature.id),
                "completed": completed,
            },
        )
        self._publish(
            DocumentEventType.SIGNED,
            document_id,
            signature_id=str(signature.id),
            signer_email=signature.signer_email,
        )
        if completed:
            self._publish(DocumentEventType.COMPLETED, document_id)
        return signature

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    async def get_document(self, document_id: UUID, caller: Caller) -> DocumentDetails:
        """
        Get a document with fields, signatures and the latest analysis.

        Raises:
            DocumentNotFoundError: Document does not exist
            ForbiddenError: Caller is not admin, sender or an invited signer
        """
        document = await self._get_viewable_document(document_id, caller)
        analysis = await self.repository.get_latest_analysis(document_id)
        return DocumentDetails(document=document, analysis=analysis)

    async def list_documents(self, caller: Caller) -> Sequence[DocumentModel]:
        """
        List documents newest first.

        Admins see every document; everyone else sees the documents they sent.
        """
        if policy.is_admin(caller):
            return await self.repository.list_documents()
        return await self.repository.list_documents(sender_id=caller.user_id)

    async def list_signing_requests(self, caller: Caller) -> list[SigningRequest]:
        """Documents the caller was invited to sign, with their own signature."""
        documents = await self.repository.list_documents_for_signer(caller.user_id)
        requests = []
        for document in documents:
            for signature in document.signatures:
                if signature.signer_id == caller.user_id:
                    requests.append(SigningRequest(document=document, signature=signature))
                    break
        return requests

    async def get_download_url(self, document_id: UUID, caller: Caller):
        """
        Presigned GET URL for the stored file.

        Returns:
            tuple[str, datetime]: (url, expires_at)

        Raises:
            DocumentNotFoundError: Document does not exist
            ForbiddenError: Caller may not view the document
            StorageError: URL could not be signed
        """
        if self.storage is None:
            raise RuntimeError("WorkflowService was created without a storage gateway")
        document = await self._get_viewable_document(document_id, caller)
        return self.storage.generate_presigned_download_url(
            document.storage_key,
            expires_in=self.storage_settings.presigned_url_expiry,
        )
