"""
Public Pydantic schemas used by FastAPI routes and tests.
"""

from .common import ErrorInfo, ErrorResponse, MessageResponse  # noqa: F401
from .movie import MovieCreate, MovieRead, MovieUpdate  # noqa: F401
