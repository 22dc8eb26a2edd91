"""
Database seeding utilities for sample catalog data.

Seeds a handful of movies when the catalog is empty, so a fresh
environment has something to show.

Usage:
  python -m movie_catalog.db.run_migrations upgrade head
  python -m movie_catalog.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from movie_catalog.db.config import Settings, load_settings
from movie_catalog.db.models.movie import Movie
from movie_catalog.db.session import SessionFactory
from movie_catalog.repositories.movies import MovieRepository

logger = logging.getLogger(__name__)

SAMPLE_MOVIES: List[Tuple[str, Optional[str]]] = [
    ("Seven Samurai", "Akira Kurosawa"),
    ("Stalker", "Andrei Tarkovsky"),
    ("The Third Man", "Carol Reed"),
    ("Nosferatu", None),
]


# PUBLIC_INTERFACE
async def seed_movies(factory: SessionFactory) -> int:
    """
    Insert SAMPLE_MOVIES if the catalog is empty.

    Returns:
      int: number of movies inserted (0 when the catalog already had rows)
    """
    async with factory() as session:
        repo = MovieRepository(session)
        if await repo.list_movies():
            logger.info("Catalog already populated; skipping seed.")
            return 0
        for name, director in SAMPLE_MOVIES:
            await repo.add(Movie(name=name, director=director))
    logger.info("Seeded %d movies.", len(SAMPLE_MOVIES))
    return len(SAMPLE_MOVIES)


async def _main(settings: Settings) -> None:
    factory = SessionFactory(settings)
    try:
        await seed_movies(factory)
    finally:
        await factory.dispose()


if __name__ == "__main__":
    from movie_catalog.core.logging import configure_logging

    configure_logging()
    asyncio.run(_main(load_settings()))
