"""
Document field ORM model.

Fillable field placed on a document before it is sent.

Dependencies: sqlalchemy, signflow.boundary.db.base
System role: Field layout persistence
"""

import enum
from uuid import UUID

from sqlalchemy import Boolean, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signflow.boundary.db.base import Base, TimestampMixin, UUIDMixin


class FieldType(str, enum.Enum):
    """Kinds of fillable fields."""

    SIGNATURE = "SIGNATURE"
    DATE = "DATE"
    TEXT = "TEXT"
    INITIAL = "INITIAL"


class DocumentFieldModel(Base, UUIDMixin, TimestampMixin):
    """
    Field ORM model.

    The whole set for a document is replaced at once; rows are never
    patched individually.

    Attributes:
        document_id: Parent document (cascade delete)
        field_type: SIGNATURE/DATE/TEXT/INITIAL
        label: Display label
        required: Whether the signer must fill it
        page, x, y, width, height: Placement metadata
        signer_email: Optional signer this field is assigned to
        position: Insertion order within the set
    """

    __tablename__ = "document_fields"

    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field_type: Mapped[FieldType] = mapped_column(
        Enum(FieldType, native_enum=False),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    page: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    x: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    y: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    width: Mapped[float | None] = mapped_column(Float, nullable=True)
    height: Mapped[float | None] = mapped_column(Float, nullable=True)
    signer_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    document = relationship("DocumentModel", back_populates="fields")
