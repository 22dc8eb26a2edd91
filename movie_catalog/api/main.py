from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional
from uuid import uuid4

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from movie_catalog.core.errors import NotFoundError, StorageFailure
from movie_catalog.core.logging import configure_logging, correlation_id_var
from movie_catalog.core.settings import AppSettings, get_app_settings
from movie_catalog.db.config import Settings, load_settings
from movie_catalog.db.run_migrations import main as run_alembic
from movie_catalog.db.seed import seed_movies
from movie_catalog.db.session import SessionFactory
from movie_catalog.schemas.common import ErrorInfo, ErrorResponse, MessageResponse

# Routers
from movie_catalog.api.routes.movies import router as movies_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness check."},
    {"name": "Movies", "description": "Catalog create/read/update/delete."},
]


def _build_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build a standardized ErrorResponse JSONResponse."""
    ts = datetime.now(tz=timezone.utc)
    corr = getattr(request.state, "correlation_id", None)
    err = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=corr,
        path=request.url.path,
        method=request.method,
        timestamp=ts,
    )
    # Handlers behind ServerErrorMiddleware bypass request_context_middleware.
    headers = {"X-Correlation-ID": corr} if corr else None
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json"), headers=headers)


async def request_context_middleware(request: Request, call_next):
    """
    Enrich request context with correlation_id for logging and error responses.
    Adds 'X-Correlation-ID' to every response.
    """
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    token_corr = correlation_id_var.set(corr)
    request.state.correlation_id = corr

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token_corr)

    response.headers["X-Correlation-ID"] = corr
    return response


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Global handler for HTTPException to produce a standardized error envelope.
    """
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    return _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type="http_error",
        message=str(detail),
        details=None if isinstance(exc.detail, str) else exc.detail,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Global handler for request validation errors with a standard structure.
    """
    return _build_error_response(
        request=request,
        status_code=422,
        error_type="validation_error",
        message="Request validation failed",
        details=exc.errors(),
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    return _build_error_response(
        request=request,
        status_code=404,
        error_type="not_found",
        message=str(exc),
        details={"entity": exc.entity, "key": str(exc.key)},
    )


async def storage_failure_handler(request: Request, exc: StorageFailure):
    """
    StorageFailure means the store refused or lost the operation; report 503
    without leaking driver messages.
    """
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return _build_error_response(
        request=request,
        status_code=503,
        error_type="storage_error",
        message="The catalog store could not complete the operation",
        details=None,
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces and to return a structured error.
    """
    logger.exception("Unhandled error processing request")
    return _build_error_response(
        request=request,
        status_code=500,
        error_type="internal_error",
        message="An unexpected error occurred",
        details=None,
    )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    app_settings: Optional[AppSettings] = None,
    session_factory: Optional[SessionFactory] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters:
      settings: database settings; resolved with load_settings() when omitted
      app_settings: application settings; read from the environment when omitted
      session_factory: prebuilt factory (tests share one with their fixtures)

    Raises:
      ConfigurationError: when no usable connection string is configured.

    Run with: uvicorn --factory movie_catalog.api.main:create_app
    """
    app_settings = app_settings or get_app_settings()
    configure_logging(app_settings.LOG_LEVEL)

    if session_factory is None:
        session_factory = SessionFactory(settings or load_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """
        Prepare the schema and optional sample data, then dispose the engine on shutdown.

        Startup failures are logged and the service keeps running; readiness shows up on the first request.
        """
        if app_settings.RUN_MIGRATIONS_ON_STARTUP:
            try:
                logger.info("Running Alembic migrations: upgrade head")
                # env.py drives its own event loop, so keep it off this one.
                await asyncio.to_thread(run_alembic, ["upgrade", "head"], session_factory.settings)
                logger.info("Migrations completed.")
            except Exception as exc:
                logger.exception("Migration step failed: %s", exc)

        if app_settings.CREATE_SCHEMA_ON_STARTUP:
            try:
                await session_factory.create_schema()
            except Exception as exc:
                logger.exception("Schema creation failed: %s", exc)

        if app_settings.AUTO_SEED:
            try:
                logger.info("Running database seeding...")
                await seed_movies(session_factory)
                logger.info("Seeding completed.")
            except Exception as exc:
                logger.exception("Seeding step failed: %s", exc)

        yield

        await session_factory.dispose()

    app = FastAPI(
        title=app_settings.APP_NAME,
        description=app_settings.APP_DESCRIPTION,
        version=app_settings.APP_VERSION,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory

    app.middleware("http")(request_context_middleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageFailure, storage_failure_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Build API v1 router and include sub-routers
    api_v1 = APIRouter(prefix="/api/v1")

    @api_v1.get(
        "/health",
        response_model=MessageResponse,
        summary="Health Check",
        tags=["Health"],
    )
    def health_check() -> MessageResponse:
        """
        Basic liveness health check endpoint.

        Returns:
            MessageResponse: Simple confirmation that the service is running.
        """
        return MessageResponse(message="Healthy")

    api_v1.include_router(movies_router)
    app.include_router(api_v1)

    # Static front end last so API routes take precedence; html=True serves index.html.
    static_dir = app_settings.STATIC_DIR
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.info("Static directory %s not found; serving API only.", static_dir)

    return app
