"""
Shared fixtures.

Every test starts with a clean database-related environment and no cached
client; the API tests run against the in-memory adapter.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from profile_gateway.config import logfire_config
from profile_gateway.db.errors import DatabaseError
from profile_gateway.db.factory import reset_db_client, set_db_client
from profile_gateway.db.memory_adapter import MemoryDatabaseClient
from profile_gateway.db.protocol import APIResponse
from profile_gateway.main import app

ENV_VARS = (
    "DB_PROVIDER",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "SUPABASE_KEY",
    "POSTGRES_DSN",
    "POSTGRES_POOL_MIN",
    "POSTGRES_POOL_MAX",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOGFIRE_ENABLED",
    "LOGFIRE_TOKEN",
)


class StubTableQueryBuilder:
    """Builder that records the chain and returns (or raises) a fixed outcome."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return record

    def execute(self):
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class StubDatabaseClient:
    """DatabaseClient whose every query ends in the same outcome."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.builders = []

    def table(self, name):
        builder = StubTableQueryBuilder(self.outcome)
        self.builders.append((name, builder))
        return builder


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_db_client()
    yield
    reset_db_client()


@pytest.fixture
def fresh_logging(monkeypatch):
    """Let setup_logfire run again and undo its changes to the root logger."""
    monkeypatch.setattr(logfire_config, "_configured", False)
    monkeypatch.setattr(logfire_config, "_logfire_enabled", False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def memory_db():
    db = MemoryDatabaseClient()
    set_db_client(db)
    return db


@pytest.fixture
def client(memory_db):
    return TestClient(app)


@pytest.fixture
def failing_db():
    def install(message="boom", http_status=None):
        db = StubDatabaseClient(DatabaseError(message, http_status=http_status))
        set_db_client(db)
        return db

    return install


@pytest.fixture
def empty_result_db():
    db = StubDatabaseClient(APIResponse(data=[], count=0))
    set_db_client(db)
    return db
