from __future__ import annotations

from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from movie_catalog.db.base import Base, UUIDPkMixin


class Movie(UUIDPkMixin, Base):
    """A catalogued movie."""
    __tablename__ = "movies"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    director: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"Movie(id={self.id!r}, name={self.name!r}, director={self.director!r})"
