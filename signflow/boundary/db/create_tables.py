"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, signflow.configs
System role: Database schema initialization

Usage:
    python -m signflow.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from signflow.boundary.db.base import Base
from signflow.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
import signflow.boundary.db.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: issues CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Args:
        engine: Engine to use (defaults to the configured engine)

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_all_tables())
