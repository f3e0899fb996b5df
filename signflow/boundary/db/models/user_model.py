"""
User ORM model.

Represents senders, signers and administrators. Signers invited by email
are provisioned as placeholder rows without a password.

Dependencies: sqlalchemy, signflow.boundary.db.base
System role: Identity persistence for workflow authorization
"""

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signflow.boundary.db.base import Base, TimestampMixin, UUIDMixin


class UserRole(str, enum.Enum):
    """
    Capability levels checked at the workflow boundary.

    ADMIN: May view and manage every document
    SENDER: May upload documents and send them for signature
    SIGNER: Provisioned through an invite; signs documents sent to them
    """

    ADMIN = "ADMIN"
    SENDER = "SENDER"
    SIGNER = "SIGNER"


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        email: Unique login email, stored lower-case
        first_name: Given name (may be empty for provisioned signers)
        last_name: Family name (may be empty for provisioned signers)
        password_hash: Null for signers that have never set a password
        role: Capability level (enum: ADMIN/SENDER/SIGNER)

    Relationships:
        documents: Documents this user sent
        signatures: Signature requests addressed to this user
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Null until the user sets a password upstream",
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False),
        nullable=False,
        default=UserRole.SENDER,
    )

    # Relationships
    documents = relationship("DocumentModel", back_populates="sender")
    signatures = relationship("SignatureModel", back_populates="signer")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
