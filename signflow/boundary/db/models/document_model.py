"""
Document ORM model.

Represents an uploaded document moving through the signature workflow.

Dependencies: sqlalchemy, signflow.boundary.db.base
System role: Document persistence for the signature workflow
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signflow.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document signature lifecycle states.

    DRAFT: Uploaded; fields may still be edited
    SENT: Dispatched to signers, nobody has signed yet
    IN_PROGRESS: At least one signer signed, others still pending
    COMPLETED: Every signature is SIGNED (terminal)
    """

    DRAFT = "DRAFT"
    SENT = "SENT"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking signature workflow state.

    Lifecycle: Upload (DRAFT) → Send (SENT) → first signature (IN_PROGRESS)
    → last signature (COMPLETED). Status is only written by the workflow
    service; fields are only replaced while DRAFT.

    Attributes:
        id: UUID primary key (auto-generated)
        sender_id: Foreign key to UserModel owning the document
        title: Display title
        description: Optional free text
        original_filename: Filename as uploaded
        storage_key: Object key in the documents bucket
        file_url: Object URL returned by storage at upload time
        file_size: Size in bytes
        mime_type: Content type
        status: Workflow state (enum: DRAFT/SENT/IN_PROGRESS/COMPLETED)
        sent_at: First send timestamp (UTC)
        completed_at: Completion timestamp (UTC)

    Relationships:
        sender: Owning UserModel
        fields: Ordered DocumentFieldModel rows (cascade delete)
        signatures: SignatureModel rows (cascade delete)
        analyses: AIAnalysisModel rows, newest last (cascade delete)
    """

    __tablename__ = "documents"

    sender_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    storage_key: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="S3 object key for the raw document",
    )
    file_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    mime_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="application/octet-stream",
    )
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.DRAFT,
    )
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    sender = relationship("UserModel", back_populates="documents")
    fields = relationship(
        "DocumentFieldModel",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentFieldModel.position",
    )
    signatures = relationship(
        "SignatureModel",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="SignatureModel.created_at",
    )
    analyses = relationship(
        "AIAnalysisModel",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="AIAnalysisModel.created_at",
    )
