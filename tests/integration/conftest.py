"""Integration test fixtures for database operations.

These fixtures require a PostgreSQL database, taken from TEST_DATABASE_URL.
Tests are skipped when it is not set. Tables are created from the model
metadata and dropped again after each test.
"""

import os
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.app import models  # noqa: F401 - registers tables on the metadata

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")



def pytest_collection_modifyitems(config, items):
    if TEST_DATABASE_URL:
        return
    skip = pytest.mark.skip(reason="TEST_DATABASE_URL is not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Engine on a freshly created schema."""
    assert TEST_DATABASE_URL is not None
    test_engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does not auto-commit. Tests must call `await session.commit()`
    to make changes visible to other sessions.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def other_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """A second, independent session for simulating a concurrent writer."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
