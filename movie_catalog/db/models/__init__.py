"""
ORM models for the movie catalog.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .movie import Movie  # noqa: F401

__all__ = ["Movie"]
