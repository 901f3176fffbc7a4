"""Async database engine and session factory.

Provides async connectivity for the primary store using the SQLAlchemy
2.0 asyncio extension (asyncpg for PostgreSQL, aiosqlite for local runs).
Engines are owned by the caller: ``open_service`` and the CLI commands
create one per run and dispose of it on exit.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from brewcache.config import Settings, settings


def create_engine(
    database_url: str, echo: bool = False, config: Settings | None = None
) -> AsyncEngine:
    """Create an async engine with pool settings from configuration.

    SQLite engines keep SQLAlchemy's default pool.
    """
    config = config or settings
    options: dict[str, Any] = {"echo": echo}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_timeout=config.db_pool_timeout,
            pool_recycle=config.db_pool_recycle,
            pool_pre_ping=True,  # Verify connection health
        )
    return create_async_engine(database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_context(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Provide a transactional scope around a series of operations.

    Usage:
        async with session_context(factory) as session:
            session.add(...)
    """
    session = factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database (create tables if not exists)."""
    from brewcache.persistence.tables import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def health_check(factory: async_sessionmaker[AsyncSession]) -> bool:
    """Check database connectivity."""
    try:
        async with session_context(factory) as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
