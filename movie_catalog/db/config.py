from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Tuple, Type, Union

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from movie_catalog.core.errors import ConfigurationError

_SCHEME_RE = re.compile(r"^(?P<dialect>\w+)(?P<driver>\+\w+)?://")

# Async driver used when a connection string names only the dialect.
_ASYNC_DRIVERS = {
    "postgresql": "asyncpg",
    "sqlite": "aiosqlite",
}


class Settings(BaseSettings):
    """
    Database configuration.

    Values are layered, highest precedence first:
      - keyword arguments
      - environment variables (CONNECTION_STRING, SQL_ECHO, ENVIRONMENT)
      - .env
      - appsettings.{ENVIRONMENT}.json
      - appsettings.json

    The JSON layers are only consulted when the settings are built through
    load_settings(), which decides where the files live.
    """

    CONNECTION_STRING: Optional[str] = Field(
        default=None, description="Default database connection string (SQLAlchemy URL)."
    )

    # SQLAlchemy engine options
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    # General environment
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (Development/Staging/Production)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Environment variables override the JSON settings files.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def connection_string(self) -> str:
        """Return the configured connection string, or raise ConfigurationError if unusable."""
        value = (self.CONNECTION_STRING or "").strip()
        if not value:
            raise ConfigurationError(
                "Could not find a connection string. Set CONNECTION_STRING in the "
                "environment or in appsettings.json."
            )
        return value

    @property
    def async_database_url(self) -> str:
        """
        SQLAlchemy URL with an asyncio driver, required for AsyncEngine.

        Bare dialects are mapped onto their async driver (asyncpg, aiosqlite).
        A URL that already names a driver is returned untouched.
        """
        url = self.connection_string
        match = _SCHEME_RE.match(url)
        if match is None:
            raise ConfigurationError(f"Connection string is not a database URL: {url!r}")
        if match.group("driver"):
            return url
        dialect = match.group("dialect")
        if dialect == "postgres":
            dialect = "postgresql"
        driver = _ASYNC_DRIVERS.get(dialect)
        if driver is None:
            return url
        return _SCHEME_RE.sub(f"{dialect}+{driver}://", url, count=1)

    @property
    def sync_database_url(self) -> str:
        """Driverless URL variant, sufficient for Alembic offline mode."""
        url = self.connection_string
        if _SCHEME_RE.match(url) is None:
            raise ConfigurationError(f"Connection string is not a database URL: {url!r}")
        return re.sub(r"^(\w+)\+\w+://", r"\1://", url, count=1)


# PUBLIC_INTERFACE
def load_settings(
    base_path: Union[str, Path, None] = None,
    environment: Optional[str] = None,
) -> Settings:
    """
    Build Settings layered over appsettings.json and appsettings.{environment}.json.

    Parameters:
      base_path: directory holding the settings files (default: current directory)
      environment: environment name; defaults to the ENVIRONMENT variable
    """
    base = Path(base_path) if base_path is not None else Path.cwd()
    env_name = environment if environment is not None else os.environ.get("ENVIRONMENT")

    json_files = [base / "appsettings.json"]
    if env_name:
        json_files.append(base / f"appsettings.{env_name}.json")

    class _LayeredSettings(Settings):
        model_config = SettingsConfigDict(json_file=json_files)

    return _LayeredSettings()
