from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import make_transient

from movie_catalog.core.errors import NotFoundError
from movie_catalog.db.models.movie import Movie
from .base import BaseRepository
from .interfaces import AbstractMovieRepository

logger = logging.getLogger(__name__)


class MovieRepository(BaseRepository, AbstractMovieRepository):
    """
    Repository for movies.

    Stateless façade over a single AsyncSession. The session must not be
    shared with other concurrently running tasks; give each unit of work its
    own session.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_movies(self) -> List[Movie]:
        res = await self.scalars(select(Movie))
        return list(res)

    async def get_by_id(self, movie_id: UUID) -> Optional[Movie]:
        return await self.get(Movie, movie_id)

    async def add(self, movie: Movie) -> Movie:
        """
        Insert movie as a new row under a fresh id.

        An object that is already stored (attached to any session or detached
        from one) is detached first, so the commit is always an INSERT and the
        existing row keeps its id.
        """
        state = inspect(movie)
        if state.persistent or state.detached:
            # make_transient also expunges from the owning session.
            make_transient(movie)
        movie.id = uuid4()
        await super().add(movie)
        await self.commit()
        logger.debug("Added movie %s", movie.id)
        return movie

    async def edit(self, movie: Movie) -> Movie:
        stored = await self._require(movie.id)
        stored.name = movie.name
        stored.director = movie.director
        await self.commit()
        logger.debug("Edited movie %s", stored.id)
        return stored

    async def delete(self, movie: Movie) -> None:
        stored = await self._require(movie.id)
        await super().delete(stored)
        await self.commit()
        logger.debug("Deleted movie %s", movie.id)

    async def _require(self, movie_id: Optional[UUID]) -> Movie:
        if movie_id is None:
            raise NotFoundError("Movie", movie_id)
        stored = await self.get_by_id(movie_id)
        if stored is None:
            raise NotFoundError("Movie", movie_id)
        return stored
