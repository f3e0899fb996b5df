"""
AI analysis ORM model.

Append-only analysis results for a document. Never read by the workflow.

Dependencies: sqlalchemy, signflow.boundary.db.base
System role: Derived artifact persistence
"""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signflow.boundary.db.base import Base, TimestampMixin, UUIDMixin


class AIAnalysisModel(Base, UUIDMixin, TimestampMixin):
    """AI analysis row; the newest row per document is the current one."""

    __tablename__ = "ai_analyses"

    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    risks: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    compliance: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    suggestions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Relationships
    document = relationship("DocumentModel", back_populates="analyses")
