"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, table creation
and the FastAPI dependency for database session injection.

Dependencies: sqlalchemy, aiosqlite, askdoc.configs
System role: Database connection lifecycle management
"""

from pathlib import Path
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from askdoc.configs.database import DatabaseSettings


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite leaves FK enforcement off per connection unless asked."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_async_engine(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLite engine with foreign keys enabled.

    The parent directory of the database file is created if missing.
    An in-memory database shares one connection through StaticPool.

    Args:
        db_config: Database settings section

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine(settings.database)
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    kwargs: dict = {"echo": db_config.echo_sql}
    if db_config.path == ":memory:":
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        Path(db_config.path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(db_config.async_database_url, **kwargs)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    return engine


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory bound to an engine.

    Args:
        engine: Async engine from get_async_engine()

    Returns:
        async_sessionmaker: Factory with autoflush off and no expiry on commit
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create every metadata table that does not yet exist."""
    # Import models so they register on Base.metadata
    from askdoc.boundary.db import models  # noqa: F401
    from askdoc.boundary.db.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Uses the session factory created in the application lifespan and ensures
    the session is closed after the route completes, even if exceptions occur.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)

    Usage:
        @router.get("/sites/{id}")
        async def get_site(id: str, db: AsyncSession = Depends(get_async_db)):
            return await site_crud.get_by_id(db, id)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        yield session
