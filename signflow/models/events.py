"""
Document change events.

Published by the workflow service after a committed transition and
delivered to WebSocket watchers of the document.

Dependencies: pydantic
System role: Notification payload contracts
"""

import enum
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class DocumentEventType(str, enum.Enum):
    SENT = "document-sent"
    SIGNED = "document-signed"
    COMPLETED = "document-completed"


class DocumentEvent(BaseModel):
    """Event envelope pushed to the document room."""

    event: DocumentEventType
    document_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
