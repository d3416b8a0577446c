"""
FastAPI application bootstrap with: \n
- Lifespan-managed database startup: settings → connection pool → liveness probe \n
- The pool handle attached to `app.state.db_pool` and closed on shutdown \n
- The root router \n
- A uvicorn entrypoint (`run`) listening on port 8080 by default \n

Environment contract: \n
- DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD, DB_SSLMODE: database settings (see `backend.database.config.config`). \n
- APP_HOST, APP_PORT, LOG_LEVEL: server settings. \n
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from backend.api.fast_api import router
from backend.database.config.config import DatabaseSettings, ServerSettings, load_settings
from backend.database.config.connection_engine import init_pool
from backend.database.errors import ConfigError

logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup (before yielding):
        * Use `app.state.settings` if the caller pre-loaded it, else load settings.
        * Open and probe the connection pool, attach it to `app.state.db_pool`.
        * Any `DatabaseSetupError` propagates and aborts startup.
    - On shutdown (after yielding):
        * Close the pool.
    """
    settings = getattr(app.state, "settings", None) or load_settings()
    app.state.settings = settings
    logger.info("Connecting to %s", settings.safe_dsn())

    pool = init_pool(settings)
    app.state.db_pool = pool
    try:
        yield
    finally:
        pool.close()
        app.state.db_pool = None


def create_app(settings: Optional[DatabaseSettings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    settings : DatabaseSettings, optional
        Pre-loaded database settings. When omitted they are loaded during startup.
    """
    app = FastAPI(title="Rangkai Edu Backend", lifespan=lifespan)
    app.state.settings = settings
    app.state.db_pool = None
    app.include_router(router)
    return app


app = create_app()
"""Application object for `uvicorn backend.main:app`; settings are loaded at startup."""


def configure_logging(level: str) -> None:
    """Set the root log level and format."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def run() -> None:
    """
    Console entrypoint: validate configuration, then serve with uvicorn.

    Exits with status 1 if the server or database configuration is invalid.
    """
    try:
        server = ServerSettings()
        configure_logging(server.LOG_LEVEL)
    except (ValidationError, ValueError) as exc:
        logger.error("Invalid server configuration: %s", exc)
        sys.exit(1)

    logger.info("Rangkai Edu Backend Server")

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logger.info("Server starting on %s:%d", server.APP_HOST, server.APP_PORT)
    uvicorn.run(create_app(settings), host=server.APP_HOST, port=server.APP_PORT, log_level=server.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
