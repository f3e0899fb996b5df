"""
Signer resolution.

Maps an invited email to a user id, provisioning a password-less SIGNER
user when nobody has that email yet. Anyone who later authenticates with
that email gains access to the signing flow.

Dependencies: sqlalchemy, signflow.boundary.db
System role: Signer provisioning collaborator of the workflow service
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from signflow.boundary.db.CRUD import normalize_email
from signflow.boundary.db.models import UserRole
from signflow.boundary.db.repository import DocumentRepository
from signflow.core.exceptions import ConflictError

logger = logging.getLogger(__name__)


def split_name(name: str) -> tuple[str, str]:
    """Split a display name into first and last name."""
    parts = (name or "").strip().split(" ", 1)
    first_name = parts[0] if parts else ""
    last_name = parts[1].strip() if len(parts) > 1 else ""
    return first_name, last_name


class SignerResolver:
    """Resolves invited emails to users within the caller's transaction."""

    def __init__(self, repository: DocumentRepository) -> None:
        self.repository = repository

    async def resolve_or_provision(self, email: str, name: str = "") -> UUID:
        """
        Return the id of the user owning an email, creating one if needed.

        Args:
            email: Signer email (any case)
            name: Display name used for a new user

        Returns:
            UUID: Existing or newly provisioned user id

        Raises:
            ConflictError: A concurrent request provisioned the same email first
        """
        email = normalize_email(email)
        user = await self.repository.get_user_by_email(email)
        if user is not None:
            return user.id

        first_name, last_name = split_name(name)
        try:
            user = await self.repository.create_user(
                email=email,
                first_name=first_name,
                last_name=last_name,
                password_hash=None,
                role=UserRole.SIGNER,
            )
        except IntegrityError as e:
            raise ConflictError(
                "Signer was provisioned concurrently, retry the request",
                {"email": email},
            ) from e

        logger.info("Provisioned signer user", extra={"user_id": str(user.id)})
        return user.id
