"""
Database fixtures for testing.
Each test gets its own SQLite database file, so tests never share state.
"""

from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

import listings_service.models  # noqa: F401  (registers the tables)
from listings_service.db import Base


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    # Use NullPool to avoid connection pool issues during tests
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'listings_test.db'}",
        poolclass=NullPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provides the session shared by the test body and the app under test."""
    TestingSessionLocal = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session
