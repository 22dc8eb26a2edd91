from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

from sqlalchemy import Executable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.core.errors import StorageFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Every helper converts SQLAlchemyError into StorageFailure (chained to the
    original exception). Nothing is retried. A failed commit is rolled back so
    the session stays usable.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        try:
            return await self.session.execute(statement, params or {})
        except SQLAlchemyError as exc:
            logger.error("Query failed: %s", exc)
            raise StorageFailure(str(exc)) from exc

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def get(self, entity_type: Type[T], key: Any) -> Optional[T]:
        """Load an entity by primary key, or None."""
        try:
            return await self.session.get(entity_type, key)
        except SQLAlchemyError as exc:
            logger.error("Lookup of %s %s failed: %s", entity_type.__name__, key, exc)
            raise StorageFailure(str(exc)) from exc

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)

    async def delete(self, entity: Any) -> None:
        """Mark a persistent entity for deletion."""
        await self.session.delete(entity)

    async def commit(self) -> None:
        """Commit current transaction, rolling back on failure."""
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.error("Commit failed, rolling back: %s", exc)
            await self.session.rollback()
            raise StorageFailure(str(exc)) from exc
