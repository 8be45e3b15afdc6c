# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import os
from datetime import UTC, datetime

import pytest

# Set test environment before any mailing_api import reads settings
os.environ.setdefault("TESTING", "1")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("API_TOKEN", "test")
os.environ.setdefault("STORE_PROVIDER", "memory")
os.environ.setdefault("WATCHER_TICK_PERIOD_SECONDS", "3600")
os.environ.setdefault("LOG_JSON", "false")

from sqlalchemy.orm import sessionmaker  # noqa: E402

from mailing_api.config import Settings  # noqa: E402
from mailing_api.database import create_db_engine, init_db  # noqa: E402
from mailing_api.storage.base import Entry  # noqa: E402
from mailing_api.storage.factory import reset_entry_store  # noqa: E402
from mailing_api.storage.memory_provider import MemoryEntryStore  # noqa: E402
from mailing_api.storage.sql_provider import SQLEntryStore  # noqa: E402

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _reset_entry_store():
    """Every test starts without a cached store singleton."""
    reset_entry_store()
    yield
    reset_entry_store()


@pytest.fixture
def memory_store():
    return MemoryEntryStore()


@pytest.fixture
def sql_store():
    """SQL store on a private in-memory SQLite database."""
    engine = create_db_engine(Settings(_env_file=None, DATABASE_URL="sqlite:///:memory:"))
    init_db(engine)
    yield SQLEntryStore(sessionmaker(bind=engine, autoflush=False, future=True))
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Run a test against every EntryStore implementation."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def make_entry():
    """Factory for unsaved entries with sensible defaults."""

    def _make(
        email: str = "a@b.com",
        title: str = "t",
        content: str = "c",
        mailing_id: int = 1,
        insert_time: datetime = T0,
    ) -> Entry:
        return Entry(
            email=email,
            title=title,
            content=content,
            mailing_id=mailing_id,
            insert_time=insert_time,
        )

    return _make
