"""
Base CRUD operations for SQLAlchemy models.

Generic create, read and compare-and-set update shared by the model-specific
CRUD classes. None of these methods commit: the caller owns the transaction,
so several CRUD calls can be composed into one atomic unit.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs: Any) -> ModelT:
        """
        Insert a new row and return it with generated ID and timestamps.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(
        self,
        session: AsyncSession,
        id: UUID,
        for_update: bool = False,
    ) -> ModelT | None:
        """
        Retrieve a single row by primary key.

        Always reloads attribute state from the database so a row fetched
        earlier in the same session does not shadow a newer committed value.

        Args:
            session: Async database session
            id: UUID primary key
            for_update: Take a row lock (SELECT ... FOR UPDATE) where the backend supports it

        Returns:
            Model instance if found, None otherwise
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_where(
        self,
        session: AsyncSession,
        id: UUID,
        *conditions: Any,
        **values: Any,
    ) -> bool:
        """
        Conditionally update one row by primary key.

        The extra conditions are evaluated by the database in the same
        statement, so this is the building block for compare-and-set
        transitions.

        Args:
            session: Async database session
            id: UUID primary key
            *conditions: Additional WHERE clauses that must hold
            **values: Column values to write

        Returns:
            True if exactly one row matched and was updated
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1
