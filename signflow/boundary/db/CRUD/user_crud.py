"""
User CRUD operations.

Dependencies: sqlalchemy, signflow.boundary.db.models
System role: Identity persistence operations
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db.CRUD.base_crud import BaseCRUD
from signflow.boundary.db.models.user_model import UserModel


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup."""
    return email.strip().lower()


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel with email lookup."""

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_email(self, session: AsyncSession, email: str) -> UserModel | None:
        """
        Retrieve a user by email (case-insensitive).

        Args:
            session: Async database session
            email: Email address in any case

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(UserModel.email == normalize_email(email))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


user_crud = UserCRUD()
