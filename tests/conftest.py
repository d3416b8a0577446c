"""
Pytest configuration and fixtures
Isolates tests from the developer's environment and `.env` file.
"""
from types import SimpleNamespace

import pytest

ENV_VARS = (
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USER",
    "DB_PASSWORD",
    "DB_SSLMODE",
    "APP_HOST",
    "APP_PORT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Unset every setting and run from an empty directory (no `.env`)."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


class FakeConnection:
    def __init__(self, engine):
        self.engine = engine

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, statement):
        if self.engine.fail_with is not None:
            raise self.engine.fail_with
        self.engine.executed.append(str(statement))


class FakeEngine:
    """Stands in for a SQLAlchemy Engine: records queries and disposal."""

    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.dialect = SimpleNamespace(do_ping=lambda dbapi_connection: True)
        self.executed = []
        self.disposed = 0

    def connect(self):
        return FakeConnection(self)

    def dispose(self):
        self.disposed += 1


@pytest.fixture
def fake_engine_factory(monkeypatch):
    """
    Replace `create_engine` and the health-check installer in the connection
    engine module. Returns a dict holding the created engine and the
    keyword arguments it was created with.
    """
    from backend.database.config import connection_engine

    created = {"fail_with": None}

    def fake_create_engine(url, **kwargs):
        created["url"] = url
        created["kwargs"] = kwargs
        created["engine"] = FakeEngine(fail_with=created["fail_with"])
        return created["engine"]

    monkeypatch.setattr(connection_engine, "create_engine", fake_create_engine)
    monkeypatch.setattr(connection_engine.HealthCheck, "install", lambda self, engine: None)
    return created
