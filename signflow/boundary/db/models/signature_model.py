"""
Signature ORM model.

One row per (document, intended signer), created when the document is sent.

Dependencies: sqlalchemy, signflow.boundary.db.base
System role: Signature request persistence
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signflow.boundary.db.base import Base, TimestampMixin, UUIDMixin


class SignatureStatus(str, enum.Enum):
    """
    Signature request states.

    PENDING: Waiting for the signer
    SIGNED: Signed; the row is immutable from here on
    """

    PENDING = "PENDING"
    SIGNED = "SIGNED"


class SignatureModel(Base, UUIDMixin, TimestampMixin):
    """
    Signature ORM model.

    Transitions PENDING → SIGNED exactly once through a conditional update.
    signer_email and signer_name are copied from the invite at send time.

    Attributes:
        document_id: Parent document (cascade delete)
        signer_id: Invited user
        signer_email: Email as given in the invite
        signer_name: Name as given in the invite
        status: PENDING/SIGNED
        signed_at: Set once, when the signature lands
        signature_data: Opaque signature payload
        ip_address: Submitting IP (audit only)
        user_agent: Submitting user agent (audit only)

    Constraints:
        (document_id, signer_id) unique
    """

    __tablename__ = "signatures"
    __table_args__ = (
        UniqueConstraint("document_id", "signer_id", name="uq_signatures_document_signer"),
    )

    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    signer_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    signer_email: Mapped[str] = mapped_column(String(320), nullable=False)
    signer_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    status: Mapped[SignatureStatus] = mapped_column(
        Enum(SignatureStatus, native_enum=False),
        nullable=False,
        default=SignatureStatus.PENDING,
    )
    signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    signature_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # Relationships
    document = relationship("DocumentModel", back_populates="signatures")
    signer = relationship("UserModel", back_populates="signatures")
