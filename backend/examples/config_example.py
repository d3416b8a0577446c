"""Print the loaded database configuration and its connection string."""

import sys

from backend.database.config.config import load_settings
from backend.database.errors import ConfigError


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 1

    print("Database Config:")
    print(f"  Host: {settings.DB_HOST}")
    print(f"  Port: {settings.DB_PORT}")
    print(f"  Database: {settings.DB_NAME}")
    print(f"  Username: {settings.DB_USER}")
    print(f"  SSL Mode: {settings.DB_SSLMODE}")
    print()
    print("Connection String:")
    print(settings.build_dsn())
    return 0


if __name__ == "__main__":
    sys.exit(main())
