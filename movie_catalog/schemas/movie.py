from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MovieBase(BaseModel):
    name: str = Field(..., description="Movie title")
    director: Optional[str] = Field(default=None, description="Director name")


class MovieCreate(MovieBase):
    """Payload for adding a movie. The id is assigned by the server."""


class MovieUpdate(MovieBase):
    """Payload replacing the name and director of an existing movie."""


class MovieRead(MovieBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Unique identifier")
