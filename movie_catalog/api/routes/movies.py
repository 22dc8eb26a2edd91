from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response, status

from movie_catalog.core.deps import get_movie_repository
from movie_catalog.core.errors import NotFoundError
from movie_catalog.db.models.movie import Movie
from movie_catalog.repositories.movies import MovieRepository
from movie_catalog.schemas.movie import MovieCreate, MovieRead, MovieUpdate

router = APIRouter(prefix="/movies", tags=["Movies"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[MovieRead],
    summary="List movies",
    description="List every movie in the catalog. No ordering is guaranteed.",
)
async def list_movies(
    repo: MovieRepository = Depends(get_movie_repository),
) -> List[MovieRead]:
    movies = await repo.list_movies()
    return [MovieRead.model_validate(x) for x in movies]


# PUBLIC_INTERFACE
@router.get(
    "/{movie_id}",
    response_model=MovieRead,
    summary="Get movie",
    description="Get a movie by id.",
)
async def get_movie(
    movie_id: UUID = Path(...),
    repo: MovieRepository = Depends(get_movie_repository),
) -> MovieRead:
    movie = await repo.get_by_id(movie_id)
    if movie is None:
        raise NotFoundError("Movie", movie_id)
    return MovieRead.model_validate(movie)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=MovieRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add movie",
    description="Add a movie. The server assigns its id.",
)
async def add_movie(
    payload: MovieCreate,
    repo: MovieRepository = Depends(get_movie_repository),
) -> MovieRead:
    movie = Movie(name=payload.name, director=payload.director)
    created = await repo.add(movie)
    return MovieRead.model_validate(created)


# PUBLIC_INTERFACE
@router.put(
    "/{movie_id}",
    response_model=MovieRead,
    summary="Edit movie",
    description="Replace the name and director of an existing movie.",
)
async def edit_movie(
    payload: MovieUpdate,
    movie_id: UUID = Path(...),
    repo: MovieRepository = Depends(get_movie_repository),
) -> MovieRead:
    updated = await repo.edit(Movie(id=movie_id, name=payload.name, director=payload.director))
    return MovieRead.model_validate(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete movie",
    description="Delete a movie permanently.",
)
async def delete_movie(
    movie_id: UUID = Path(...),
    repo: MovieRepository = Depends(get_movie_repository),
) -> Response:
    await repo.delete(Movie(id=movie_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
