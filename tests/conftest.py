"""Shared pytest fixtures."""

import pytest

from jobboard.logging import clear_log_context
from jobboard.persistence import close_database

ENV_VARS = ("DATABASE_URL", "LOG_LEVEL", "ENVIRONMENT")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Run every test without job board variables from the outer shell."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    clear_log_context()
    close_database()


@pytest.fixture
def mock_env_vars(monkeypatch, tmp_path):
    """Point DATABASE_URL at a temporary SQLite file and return its URL."""
    database_url = f"sqlite:///{tmp_path / 'env.db'}"
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("ENVIRONMENT", "test")
    return database_url
