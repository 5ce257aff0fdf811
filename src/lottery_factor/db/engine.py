"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from lottery_factor.config import get_settings
from lottery_factor.db.models import Base

# Module-level engine instance (initialized lazily)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def configure_engine(database_url: str) -> AsyncEngine:
    """Bind the module engine to ``database_url``.

    Used by the CLI ``--database`` option. Call before the first session;
    an engine that is already open must go through ``dispose_engine()`` first.

    Raises:
        RuntimeError: If an engine is already configured
    """
    global _engine, _async_session_factory
    if _engine is not None:
        raise RuntimeError(
            f"Engine already bound to {_engine.url!r}; call dispose_engine() first"
        )
    _engine = create_async_engine(
        database_url,
        future=True,
        poolclass=pool.NullPool,  # Required for SQLite to prevent "database is locked"
    )
    _async_session_factory = None
    return _engine


def get_engine() -> AsyncEngine:
    """Get or create the async SQLAlchemy engine."""
    if _engine is None:
        return configure_engine(get_settings().database_url)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the async session factory."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _async_session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session with automatic cleanup.

    Pending work is committed on exit and rolled back on error. Sync code
    commits page by page itself, so only the last open page is affected.

    Usage:
        async with get_session() as session:
            repository_id = await RepositoryRepository(session).get_or_create_id("o", "n")
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all database tables if they do not exist."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the engine and close all connections."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
