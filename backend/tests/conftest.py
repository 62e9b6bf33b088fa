"""
Shared pytest fixtures.

Settings are pinned to the test environment before any app module reads them.
"""

import json
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_PROVIDER", "mock")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.infrastructure.local.database import Base, enable_sqlite_foreign_keys


@pytest.fixture
async def engine():
    """In-memory SQLite engine with all tables created and foreign keys enforced."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_user_id():
    return "test_user_123"


def drain(outbox) -> list[dict]:
    """Pop every frame currently queued for a session (close sentinel excluded)."""
    frames = []
    while not outbox.empty():
        raw = outbox.get_nowait()
        if raw is not None:
            frames.append(json.loads(raw))
    return frames


@pytest.fixture
def drain_outbox():
    return drain
