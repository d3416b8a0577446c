"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Strongly-typed database and server configuration using:
- Pydantic v2 ``BaseSettings`` for environment-driven values
- ``pydantic-settings`` v2 for ``.env`` loading and model config

Load Order & Behavior
---------------------
- Values are read from the process environment first, then from ``.env``.
- A variable that is absent or set to an empty string falls back to its default.
- ``DB_HOST``, ``DB_PORT``, ``DB_NAME`` and ``DB_USER`` must be non-empty after
  defaulting; a blank value raises :class:`~backend.database.errors.ConfigError`.
- ``extra="ignore"``: unknown env vars are ignored (not an error).
- Settings objects are frozen once loaded.

Usage
-----
from backend.database.config.config import load_settings

settings = load_settings()
dsn = settings.build_dsn()

Security
--------
- Never commit secrets or the ``.env`` file to source control.
- ``build_dsn()`` embeds the password; log ``safe_dsn()`` instead.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import quote

from pydantic import Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError
from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.database.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"
"""Override file looked up in the working directory before reading the environment."""

REQUIRED_FIELDS = ("DB_HOST", "DB_PORT", "DB_NAME", "DB_USER")
"""Settings that must be non-empty after defaults are applied."""

BLANK_ERROR = "blank_setting"
"""Validation error type raised for a required setting that is blank."""


class DatabaseSettings(BaseSettings):
    """
    PostgreSQL connection settings loaded from environment variables
    or a ``.env`` file.

    Constructed once per process by :func:`load_settings` and immutable afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
        frozen=True,
    )

    DB_HOST: str = Field("localhost", description="Hostname or IP address of the database server.")
    DB_PORT: str = Field("5432", description="TCP port of the database server.")
    DB_NAME: str = Field("rangkaiedu_dev", description="Name of the application's database.")
    DB_USER: str = Field("postgres", description="Database username credential.")
    DB_PASSWORD: str = Field("password", description="Database password credential. Change this in production.")
    DB_SSLMODE: str = Field("disable", description='libpq SSL mode: "disable" for local dev, "require" for production.')

    @field_validator(*REQUIRED_FIELDS, "DB_SSLMODE")
    @classmethod
    def _strip_and_require(cls, value: str, info) -> str:
        value = value.strip()
        if not value and info.field_name in REQUIRED_FIELDS:
            raise PydanticCustomError(BLANK_ERROR, "{field} must not be empty", {"field": info.field_name})
        return value

    def build_dsn(self) -> str:
        """
        Return the PostgreSQL DSN in libpq URI form.

        ``postgres://<user>:<password>@<host>:<port>/<dbname>?sslmode=<sslmode>``

        User, password and database name are percent-encoded only where they
        contain URI-reserved characters. IPv6 literals are bracketed. A
        Unix-socket directory (a host starting with ``/``) cannot sit in the
        URI authority, so it is carried with the port as query parameters:
        ``postgres://<user>:<password>@/<dbname>?host=<dir>&port=<port>&sslmode=<sslmode>``.
        """
        return self._render(self.DB_PASSWORD)

    def safe_dsn(self) -> str:
        """Return the DSN with the password masked, for log output."""
        return self._render("***")

    def _render(self, password: str) -> str:
        host, port = self.DB_HOST, self.DB_PORT
        query = "sslmode=" + quote(self.DB_SSLMODE, safe="")
        if host.startswith("/"):
            query = "host={}&port={}&{}".format(quote(host, safe=""), quote(port, safe=""), query)
            netloc = ""
        elif ":" in host:
            netloc = "[{}]:{}".format(host.strip("[]"), port)
        else:
            netloc = "{}:{}".format(host, port)

        return "postgres://{user}:{password}@{netloc}/{name}?{query}".format(
            user=quote(self.DB_USER, safe=""),
            password=quote(password, safe="*"),
            netloc=netloc,
            name=quote(self.DB_NAME, safe=""),
            query=query,
        )


class ServerSettings(BaseSettings):
    """HTTP server settings for the uvicorn entrypoint."""

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    APP_HOST: str = Field("0.0.0.0", description="Interface the HTTP server binds to.")
    APP_PORT: int = Field(8080, description="Port the HTTP server listens on.")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ...).")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value!r}")
        return value


def load_settings(env_file: Optional[Union[str, Path]] = DEFAULT_ENV_FILE, **overrides: Any) -> DatabaseSettings:
    """
    Load and validate the database configuration.

    Parameters
    ----------
    env_file : str | Path | None
        ``KEY=VALUE`` override file read before the environment. A missing
        file is only noted in the log. ``None`` disables file loading.
    **overrides
        Explicit values (e.g. ``DB_HOST="db"``) that take precedence over
        both the environment and the file.

    Returns
    -------
    DatabaseSettings
        The frozen configuration record.

    Raises
    ------
    ConfigError
        If a required setting is blank after defaults are applied, or a
        value has the wrong type.
    """
    if env_file is not None and not Path(env_file).is_file():
        logger.info("No .env file found at %s", env_file)
        env_file = None

    try:
        return DatabaseSettings(_env_file=env_file, **overrides)
    except ValidationError as exc:
        raise _config_error(exc) from exc


def _config_error(exc: ValidationError) -> ConfigError:
    blank, invalid = [], []
    for err in exc.errors():
        name = str(err["loc"][0]) if err.get("loc") else "settings"
        if err["type"] == BLANK_ERROR:
            blank.append(name)
        else:
            invalid.append(f"{name}: {err['msg']}")

    parts = []
    if blank:
        parts.append("Missing required database configuration. Please set " + ", ".join(blank))
    if invalid:
        parts.append("Invalid database configuration: " + "; ".join(invalid))
    fields = [str(err["loc"][0]) for err in exc.errors() if err.get("loc")]
    return ConfigError(". ".join(parts), fields=fields)
