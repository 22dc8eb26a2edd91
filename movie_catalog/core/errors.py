from __future__ import annotations

from typing import Any


class MovieCatalogError(Exception):
    """Base class for errors raised by the movie catalog."""


class ConfigurationError(MovieCatalogError):
    """Raised when required configuration (e.g. the connection string) is missing or invalid."""


class StorageFailure(MovieCatalogError):
    """
    Raised when the backing store rejects an operation.

    Covers connection loss, constraint violations and failed commits. The
    original SQLAlchemy exception is kept as ``__cause__``.
    """


class NotFoundError(MovieCatalogError):
    """Raised when an edit/delete target does not exist."""

    def __init__(self, entity: str, key: Any) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} '{key}' not found")
