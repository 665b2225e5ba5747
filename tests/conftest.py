"""Test fixtures for the async runtime and an in-memory database."""

import os
import sys
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

os.environ["SETTLEMENT_LOCK_IN_MEMORY"] = "1"
os.environ.setdefault("IDENTITY_API_KEY", "")
os.environ.setdefault("PAYMENT_API_KEY", "")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import src.models  # noqa: F401
from src.locks import _MEMORY_LOCKS
from src.models.base import Base


@pytest.fixture(scope="function", autouse=True)
def reset_locks() -> Iterator[None]:
    _MEMORY_LOCKS.clear()
    yield
    _MEMORY_LOCKS.clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """Fresh schema on a shared in-memory SQLite connection."""

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
    async with sessionmaker() as session:
        yield session

    await engine.dispose()
