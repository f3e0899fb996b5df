"""
Document signature state machine.

Stateless transition rules; the workflow service persists the results.

    DRAFT --send--> SENT
    SENT --first signature--> IN_PROGRESS
    SENT/IN_PROGRESS --last signature--> COMPLETED

COMPLETED is terminal.

Dependencies: signflow.boundary.db.models
System role: Pure transition rules for the signature workflow
"""

from signflow.boundary.db.models import DocumentStatus

EDITABLE_STATUSES = frozenset({DocumentStatus.DRAFT})
SENDABLE_STATUSES = frozenset({DocumentStatus.DRAFT, DocumentStatus.SENT, DocumentStatus.IN_PROGRESS})
SIGNABLE_STATUSES = frozenset({DocumentStatus.SENT, DocumentStatus.IN_PROGRESS})


def can_edit_fields(status: DocumentStatus) -> bool:
    return status in EDITABLE_STATUSES


def can_send(status: DocumentStatus) -> bool:
    return status in SENDABLE_STATUSES


def can_sign(status: DocumentStatus) -> bool:
    return status in SIGNABLE_STATUSES


def status_after_send(current: DocumentStatus, signed_count: int) -> DocumentStatus:
    """
    Status once new signatures were appended by a send.

    Args:
        current: Status before the send (must be sendable)
        signed_count: Signatures of the document already SIGNED

    Returns:
        SENT for a first send or a resend with nothing signed yet,
        IN_PROGRESS once anything is signed
    """
    if signed_count > 0:
        return DocumentStatus.IN_PROGRESS
    if current == DocumentStatus.DRAFT:
        return DocumentStatus.SENT
    return current


def status_after_signing(pending_count: int) -> DocumentStatus:
    """Status once a signature landed and pending_count remain."""
    if pending_count == 0:
        return DocumentStatus.COMPLETED
    return DocumentStatus.IN_PROGRESS
