"""Configuration management for db-introspect."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Iterable, Optional

# Points at an explicit .env file and skips the search
ENV_FILE_VARIABLE = "DB_INTROSPECT_ENV_FILE"


def _env_file_candidates() -> Iterable[Path]:
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        yield Path(explicit).expanduser()
        return

    yield Path.cwd() / ".env"
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    yield Path(config_home) / "db-introspect" / ".env"
    yield Path.home() / ".db-introspect" / ".env"


def find_env_file() -> Optional[str]:
    """Return the first existing .env file for the CLI, or None.

    DB_INTROSPECT_ENV_FILE wins when set. Otherwise the working directory
    is searched, then the user config directory.
    """
    for candidate in _env_file_candidates():
        if candidate.is_file():
            return str(candidate)
    return None


class Settings(BaseSettings):
    """Application settings loaded from DB_INTROSPECT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DB_INTROSPECT_",
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Connection
    database_url: Optional[str] = Field(
        default=None,
        description="Connection URL of the database to introspect"
    )
    dialect: str = Field(
        default="postgres",
        description="Dialect driver to use"
    )

    # Introspection
    default_schema: str = Field(
        default="public",
        description="Schema introspected when none is given"
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Number of tables fetched concurrently (1 = sequential)"
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level for the CLI"
    )


# Global settings instance
settings = Settings()
