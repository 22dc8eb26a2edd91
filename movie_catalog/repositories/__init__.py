"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each entity and translate
store failures into movie_catalog.core.errors exceptions.
"""

from .interfaces import AbstractMovieRepository
from .movies import MovieRepository

__all__ = ["AbstractMovieRepository", "MovieRepository"]
