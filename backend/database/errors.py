"""
Database bootstrap errors.

Every failure on the configuration → pool startup path is raised as a subclass
of :class:`DatabaseSetupError`, so the caller (the FastAPI lifespan or a
script's ``main``) decides whether to exit.

Taxonomy
--------
- ``ConfigError``              missing or blank required setting
- ``DSNParseError``            the connection string could not be parsed
- ``DatabaseConnectionError``  the pool could not be created or used
- ``DatabasePingError``        the liveness probe failed
"""

from typing import Iterable, List


class DatabaseSetupError(Exception):
    """Base class for database bootstrap failures."""


class ConfigError(DatabaseSetupError):
    """
    Raised when the database configuration is invalid.

    Attributes
    ----------
    fields : list[str]
        Environment variable names that were blank or invalid.
    """

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields: List[str] = list(fields)


class DSNParseError(DatabaseSetupError):
    """Raised when a DSN cannot be parsed into a connection URL."""


class DatabaseConnectionError(DatabaseSetupError):
    """Raised when the connection pool cannot be created or is not open."""


class DatabasePingError(DatabaseConnectionError):
    """Raised when the liveness probe against a new pool fails."""
