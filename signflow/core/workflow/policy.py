"""
Role-based access rules for documents.

Admins act on every document. Senders manage their own documents.
Signers may view documents that carry a signature addressed to them.

Dependencies: signflow.boundary.db.models
System role: Authorization guards for the workflow service
"""

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from signflow.boundary.db.models import UserRole


@dataclass(frozen=True)
class Caller:
    """Authenticated principal performing a workflow operation."""

    user_id: UUID
    role: UserRole
    email: str = ""


def is_admin(caller: Caller) -> bool:
    return caller.role == UserRole.ADMIN


def can_manage(caller: Caller, sender_id: UUID) -> bool:
    """Edit fields or send: the owning sender or an admin."""
    return is_admin(caller) or caller.user_id == sender_id


def can_view(caller: Caller, sender_id: UUID, signer_ids: Iterable[UUID]) -> bool:
    """Read a document: admin, owner, or any invited signer."""
    if can_manage(caller, sender_id):
        return True
    return caller.user_id in set(signer_ids)
