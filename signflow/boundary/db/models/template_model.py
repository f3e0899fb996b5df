"""
Template ORM model.

Reusable document blueprints with a predefined field layout.

Dependencies: sqlalchemy, signflow.boundary.db.base
System role: Template persistence
"""

from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signflow.boundary.db.base import Base, TimestampMixin, UUIDMixin


class TemplateModel(Base, UUIDMixin, TimestampMixin):
    """
    Template ORM model.

    Attributes:
        name: Display name
        description: Optional free text
        file_url: Location of the template file
        fields: JSON list of field specs
        is_public: Visible to every user when true
        creator_id: Owning user
    """

    __tablename__ = "templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    fields: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    creator_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    creator = relationship("UserModel")
