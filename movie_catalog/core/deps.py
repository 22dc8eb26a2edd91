from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.db.session import SessionFactory
from movie_catalog.repositories.movies import MovieRepository


# PUBLIC_INTERFACE
def get_session_factory(request: Request) -> SessionFactory:
    """Return the SessionFactory installed on the application by create_app()."""
    return request.app.state.session_factory


# PUBLIC_INTERFACE
async def get_async_session(
    factory: SessionFactory = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a fresh AsyncSession for the duration of one request."""
    async with factory() as session:
        yield session


# PUBLIC_INTERFACE
async def get_movie_repository(
    session: AsyncSession = Depends(get_async_session),
) -> MovieRepository:
    """Return a MovieRepository bound to the request's session."""
    return MovieRepository(session)
