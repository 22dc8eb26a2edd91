from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the FastAPI service.

    This is separate from movie_catalog.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="Movie Catalog API")
    APP_DESCRIPTION: str = Field(
        default="Catalog of movies with create/read/update/delete endpoints and a static front end."
    )
    APP_VERSION: str = Field(default="0.1.0")

    # Startup behavior
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=False,
        description="If true, run Alembic migrations (upgrade head) at app startup.",
    )
    CREATE_SCHEMA_ON_STARTUP: bool = Field(
        default=False,
        description="If true, create missing tables from the ORM metadata at startup.",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="If true, insert sample movies at startup when the catalog is empty.",
    )

    # Static front end, served at / when the directory exists
    STATIC_DIR: Path = Field(default=Path("wwwroot"))

    LOG_LEVEL: str = Field(default="INFO")

    # Automatically load from .env at runtime.
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    Note:
      A new instance is constructed on each call.
    """
    return AppSettings()
