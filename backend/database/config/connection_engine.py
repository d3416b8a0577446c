"""
Connection Engine (SQLAlchemy)

Purpose
-------
Turns loaded :class:`~backend.database.config.config.DatabaseSettings` into a
live, pooled connection handle:
- Parses the settings' DSN into a SQLAlchemy ``URL`` bound to the psycopg 3 driver.
- Creates the Engine (``QueuePool``) with a fixed pool policy.
- Probes liveness once with ``SELECT 1``; the pool is either usable or startup fails.

Notes
-----
- There is no module-level engine. ``init_pool`` returns a :class:`DatabasePool`
  that the startup routine owns, passes around, and closes on shutdown.
- Connections are established lazily; the probe is the first real connect.
- No retry: a failed probe disposes the engine and raises ``DatabasePingError``.
"""

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Connection, Engine, make_url
from sqlalchemy.exc import ArgumentError, DisconnectionError, SQLAlchemyError

from backend.database.config.config import DatabaseSettings
from backend.database.errors import DatabaseConnectionError, DatabasePingError, DSNParseError

logger = logging.getLogger(__name__)

DRIVER_NAME = "postgresql+psycopg"
"""SQLAlchemy dialect+driver used for every pool."""

PING_QUERY = "SELECT 1"


@dataclass(frozen=True)
class PoolPolicy:
    """
    Sizing and lifetime policy of the connection pool.

    Attributes
    ----------
    max_size : int
        Upper bound of open connections (kept idle + overflow).
    min_size : int
        Connections kept idle in the pool once opened.
    max_lifetime : timedelta
        Connections older than this are recycled on checkout.
    health_check_period : timedelta
        A pooled connection not verified within this period is pinged on checkout.
    """

    max_size: int = 20
    min_size: int = 4
    max_lifetime: timedelta = timedelta(minutes=5)
    health_check_period: timedelta = timedelta(minutes=1)

    def engine_options(self) -> dict:
        """Keyword arguments for ``create_engine`` implementing this policy."""
        return {
            "pool_size": self.min_size,
            "max_overflow": self.max_size - self.min_size,
            "pool_recycle": int(self.max_lifetime.total_seconds()),
        }


DEFAULT_POOL_POLICY = PoolPolicy()


def parse_dsn(dsn: str) -> URL:
    """
    Parse a ``postgres://`` DSN into a SQLAlchemy URL for the psycopg driver.

    Raises
    ------
    DSNParseError
        If the string is not a valid PostgreSQL URI (bad scheme, non-numeric
        port, missing host or database).
    """
    try:
        url = make_url(dsn)
    except (ArgumentError, ValueError) as exc:
        raise DSNParseError(f"invalid DSN: {exc}") from exc

    if url.get_backend_name() not in ("postgres", "postgresql"):
        raise DSNParseError(f"invalid DSN: unsupported scheme {url.drivername!r}")
    # a Unix-socket directory travels as the ?host= query parameter
    if not (url.host or url.query.get("host")) or not url.database:
        raise DSNParseError("invalid DSN: host and database name are required")

    return url.set(drivername=DRIVER_NAME)


class HealthCheck:
    """
    Periodic liveness check for pooled connections.

    Registered on the engine's ``connect`` and ``checkout`` pool events. A
    connection is pinged on checkout only when its last successful check is
    older than ``period``; a failed ping raises ``DisconnectionError`` so the
    pool discards it and hands out a fresh connection.
    """

    INFO_KEY = "last_health_check"

    def __init__(self, ping: Callable, period: timedelta, clock: Callable[[], float] = time.monotonic):
        self._ping = ping
        self._period = period.total_seconds()
        self._clock = clock

    def on_connect(self, dbapi_connection, connection_record):
        connection_record.info[self.INFO_KEY] = self._clock()

    def on_checkout(self, dbapi_connection, connection_record, connection_proxy):
        now = self._clock()
        last = connection_record.info.get(self.INFO_KEY)
        if last is not None and now - last < self._period:
            return
        try:
            self._ping(dbapi_connection)
        except Exception as exc:
            logger.warning("Pooled connection failed health check, replacing it: %s", exc)
            raise DisconnectionError("pooled connection failed health check") from exc
        connection_record.info[self.INFO_KEY] = now

    def install(self, engine: Engine) -> None:
        event.listen(engine, "connect", self.on_connect)
        event.listen(engine, "checkout", self.on_checkout)


class DatabasePool:
    """
    Handle to a pooled set of PostgreSQL connections.

    Created closed; :meth:`open` builds the engine and runs the liveness
    probe. :meth:`close` is idempotent and safe on a handle that was never
    opened.
    """

    def __init__(self, url: URL, policy: PoolPolicy = DEFAULT_POOL_POLICY):
        self.url = url
        self.policy = policy
        self._engine: Optional[Engine] = None

    @property
    def max_size(self) -> int:
        return self.policy.max_size

    @property
    def min_size(self) -> int:
        return self.policy.min_size

    @property
    def max_lifetime(self) -> timedelta:
        return self.policy.max_lifetime

    @property
    def health_check_period(self) -> timedelta:
        return self.policy.health_check_period

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseConnectionError("connection pool is not open")
        return self._engine

    def open(self) -> "DatabasePool":
        """
        Create the engine and verify connectivity.

        Returns
        -------
        DatabasePool
            ``self``, for chaining.

        Raises
        ------
        DatabaseConnectionError
            If the engine cannot be created.
        DatabasePingError
            If the liveness probe fails. The engine is disposed first.
        """
        if self._engine is not None:
            return self

        try:
            engine = create_engine(self.url, **self.policy.engine_options())
        except (SQLAlchemyError, ImportError) as exc:
            raise DatabaseConnectionError(f"failed to create connection pool: {exc}") from exc

        HealthCheck(engine.dialect.do_ping, self.policy.health_check_period).install(engine)
        self._engine = engine

        try:
            self.ping()
        except DatabasePingError:
            self.close()
            raise

        logger.info(
            "Database connection pool initialized successfully (%s, max=%d, min=%d)",
            self.url.render_as_string(hide_password=True),
            self.max_size,
            self.min_size,
        )
        return self

    def ping(self) -> None:
        """Run the liveness probe on a pooled connection."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text(PING_QUERY))
        except SQLAlchemyError as exc:
            raise DatabasePingError(f"failed to ping database: {exc}") from exc

    def connect(self) -> Connection:
        """Check a connection out of the pool; use it as a context manager."""
        return self.engine.connect()

    def close(self) -> None:
        """Release all pooled connections. No-op if the pool is not open."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Database connection pool closed")


def init_pool(settings: DatabaseSettings, policy: PoolPolicy = DEFAULT_POOL_POLICY) -> DatabasePool:
    """
    Build, open and probe a connection pool for ``settings``.

    Raises
    ------
    DSNParseError
        If the settings produce a malformed DSN.
    DatabaseConnectionError
        If the pool cannot be created or the probe fails.
    """
    url = parse_dsn(settings.build_dsn())
    return DatabasePool(url, policy).open()
