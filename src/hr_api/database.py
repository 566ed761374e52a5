"""Database engine and session management.

The engine and session factory are created per application by
``create_app`` and stored on ``app.state``; nothing here is module-level
state. Services receive the ``AsyncSession`` explicitly.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hr_api.config import Settings


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    """Turn on FK enforcement and case-sensitive LIKE for SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA case_sensitive_like=ON")
    cursor.close()


def install_sqlite_pragmas(engine: AsyncEngine) -> None:
    """Register the SQLite connect hook on an async engine."""
    event.listen(engine.sync_engine, "connect", _enable_sqlite_pragmas)


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    Args:
        settings: Application settings

    Returns:
        AsyncEngine instance (no connection is opened yet)
    """
    if settings.is_sqlite:
        engine = create_async_engine(settings.async_database_url, echo=False)
        install_sqlite_pragmas(engine)
        return engine

    return create_async_engine(
        settings.async_database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        # Validate connections before checkout to detect stale connections
        pool_pre_ping=True,
        pool_recycle=3600,
        # Never echo SQL statements as they may contain personal data
        echo=False,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    One request is one transaction: committed when the endpoint returns,
    rolled back when anything raises.
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
