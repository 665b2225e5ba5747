"""Async engine, session factory and the request-scoped session dependency."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import get_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it from settings on first use."""

    global _engine
    if _engine is None:
        settings = get_settings()
        options: dict[str, object] = {
            "pool_pre_ping": True,
            "echo": settings.database_echo,
        }
        if not settings.database_url.startswith("sqlite"):
            options["pool_size"] = settings.database_pool_size
        _engine = create_async_engine(settings.database_url, **options)
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _sessionmaker
    if _sessionmaker is None:
        # Services read rows back after committing them.
        _sessionmaker = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _sessionmaker


async def dispose_engine() -> None:
    """Close pooled connections and drop the cached engine."""

    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


@asynccontextmanager
async def session_context() -> AsyncIterator[AsyncSession]:
    """Yield a session; anything left uncommitted is rolled back on close."""

    session = get_sessionmaker()()
    try:
        yield session
    except Exception:
        if session.in_transaction():
            logger.warning("Rolling back unfinished transaction after error")
            await session.rollback()
        raise
    finally:
        await session.close()


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one session per request."""

    async with session_context() as session:
        yield session
