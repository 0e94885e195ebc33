"""
Database session management.
Builds the async SQLAlchemy engine and session factory, creates the schema,
and provides the unit-of-work scope every request and CLI command runs in.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from promptdesk.core.config import Settings
from promptdesk.database.base import Base

logger = logging.getLogger(__name__)

CASEFOLD_FUNCTION = "casefold"


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # Built-in lower() only folds ASCII; text search matches on casefold() instead
    dbapi_connection.create_function(CASEFOLD_FUNCTION, 1, _casefold)


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    For SQLite, every new connection gets foreign key enforcement and a
    Unicode-aware ``casefold()`` SQL function used by text search.
    """
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
    )

    if settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)

    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``; objects stay usable after commit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    # Registers every model on Base.metadata
    import promptdesk.database.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema is up to date")


@asynccontextmanager
async def unit_of_work(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """
    Open a session, commit when the block succeeds and roll back on any error.

    Usage:
        async with unit_of_work(session_factory) as session:
            await PromptService(session).create(data)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
