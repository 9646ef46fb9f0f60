"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest
import pytest_asyncio

from daybook.core.entities import EntityOperations
from daybook.core.journals import JournalSession
from daybook.storage.engine import StorageEngine

TODAY = "2024-01-01"


@pytest.fixture
def db_path(tmp_path):
    """Provide a temporary database path."""
    return tmp_path / "data" / "daybook.db"


@pytest_asyncio.fixture
async def engine(db_path):
    """Open a storage engine on a temp database."""
    store = await StorageEngine.open(db_path)
    yield store
    await store.close()


@pytest.fixture
def session(engine):
    """Journal session pinned to a fixed 'today'."""
    return JournalSession(engine, today=lambda: TODAY)


@pytest.fixture
def entities(engine, session):
    """Entity operations bound to the session."""
    return EntityOperations(engine, session)
