"""
Open the connection pool and print the PostgreSQL server version.

Needs a reachable database; configure it through DB_* variables or `.env`.
"""

import logging
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backend.database.config.config import load_settings
from backend.database.config.connection_engine import init_pool
from backend.database.errors import DatabaseSetupError

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    try:
        pool = init_pool(load_settings())
    except DatabaseSetupError as exc:
        logger.error("Failed to connect to database: %s", exc)
        return 1

    try:
        with pool.connect() as conn:
            version = conn.execute(text("SELECT version()")).scalar_one()
    except SQLAlchemyError as exc:
        logger.error("Query failed: %s", exc)
        return 1
    finally:
        pool.close()

    logger.info("Database connection successful!")
    logger.info("PostgreSQL version: %s", version)
    return 0


if __name__ == "__main__":
    sys.exit(main())
