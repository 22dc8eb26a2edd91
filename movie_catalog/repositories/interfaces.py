from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from movie_catalog.db.models.movie import Movie


class AbstractMovieRepository(ABC):
    """
    Contract for movie persistence.

    Implementations hide the storage technology from callers. Mutating
    operations return only once the store has acknowledged the commit.
    """

    @abstractmethod
    async def list_movies(self) -> List[Movie]:
        """Return every stored movie, in no particular order."""
        ...

    @abstractmethod
    async def get_by_id(self, movie_id: UUID) -> Optional[Movie]:
        """Return the movie with this id, or None when absent."""
        ...

    @abstractmethod
    async def add(self, movie: Movie) -> Movie:
        """Assign a fresh id to ``movie``, persist it and commit."""
        ...

    @abstractmethod
    async def edit(self, movie: Movie) -> Movie:
        """Overwrite name/director of the stored movie with ``movie.id``. Raises NotFoundError."""
        ...

    @abstractmethod
    async def delete(self, movie: Movie) -> None:
        """Remove the stored movie with ``movie.id``. Raises NotFoundError."""
        ...
