"""
The `database` package is responsible for bootstrapping the application's
PostgreSQL connectivity.

Contents:
    - config:
        Settings loading (environment / .env), DSN building, and the
        connection pool initializer.

    - errors:
        Exception taxonomy raised along the configuration → pool startup path.
"""
