"""
Shared pytest fixtures.

Each test gets its own in-memory SQLite catalog (StaticPool, so every session
sees the same database) and opens a fresh session per unit of work.
"""

from __future__ import annotations

from typing import AsyncIterator

import pytest
import pytest_asyncio

from movie_catalog.db.config import Settings
from movie_catalog.db.session import SessionFactory


@pytest.fixture
def settings() -> Settings:
    return Settings(CONNECTION_STRING="sqlite:///:memory:")


@pytest_asyncio.fixture
async def session_factory(settings: Settings) -> AsyncIterator[SessionFactory]:
    factory = SessionFactory(settings)
    await factory.create_schema()
    yield factory
    await factory.dispose()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Run in an empty directory with no database variables set."""
    for name in ("CONNECTION_STRING", "ENVIRONMENT", "SQL_ECHO"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
