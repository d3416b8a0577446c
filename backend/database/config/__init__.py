"""
The `config` package provides the two building blocks for reaching the database.

Contents:
    - config: Configuration layer - frozen pydantic-settings records loaded from environment variables (with .env support), with DSN building and validation
    - connection_engine: Database layer - parses the DSN, creates the pooled SQLAlchemy Engine with a fixed pool policy, and probes it once before handing it out

Together they turn process environment into a verified connection pool handle.
"""
