"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and FastAPI dependency
for database session injection. Every request gets its own AsyncSession;
there is no process-wide session.

Dependencies: sqlalchemy, signflow.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from signflow.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect stale/broken
    connections early. Pool sizing is skipped for SQLite URLs.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine (cached per process)

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    settings = get_settings()
    db_config = settings.database

    if db_config.is_sqlite:
        return create_async_engine(db_config.async_database_url, echo=db_config.echo_sql)

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory() -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Returns async_sessionmaker bound to the engine with autoflush=False for
    explicit transaction control and expire_on_commit=False so committed rows
    can still be serialized.

    Returns:
        async_sessionmaker: Async session factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    engine = get_async_engine()
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Creates a new async database session for each request and ensures it's closed
    after the route completes, even if exceptions occur.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)

    Usage:
        from fastapi import Depends

        @app.get("/documents/{id}")
        async def get_document(id: str, db: AsyncSession = Depends(get_async_db)):
            return await document_crud.get_by_id(db, id)
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def ping_database(session: AsyncSession) -> bool:
    """Run a trivial query; used by the health endpoint."""
    result = await session.execute(text("SELECT 1"))
    return result.scalar_one() == 1
