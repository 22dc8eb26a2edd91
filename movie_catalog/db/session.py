from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Base
from .config import Settings

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


class SessionFactory:
    """
    Build AsyncSession objects from an explicit Settings instance.

    Owns one AsyncEngine. Each unit of work should open its own session:

        factory = SessionFactory(settings)
        async with factory() as session:
            ...

    A session must not be shared between concurrently running tasks.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        url = settings.async_database_url

        engine_kwargs: Dict[str, Any] = {"echo": settings.SQL_ECHO}
        if _is_memory_sqlite(url):
            # One shared connection keeps the in-memory database alive across sessions.
            engine_kwargs["poolclass"] = StaticPool
        elif make_url(url).get_backend_name() != "sqlite":
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self._session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine, expire_on_commit=False, autoflush=False
        )
        logger.debug("Created engine for %s", self.engine.url.render_as_string(hide_password=True))

    def __call__(self) -> AsyncSession:
        """Return a new AsyncSession bound to this factory's engine."""
        return self._session_maker()

    async def create_schema(self) -> None:
        """Create all mapped tables that do not exist yet."""
        # Import models so they are registered on Base.metadata.
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Release all pooled connections."""
        await self.engine.dispose()
