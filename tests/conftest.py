"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from pathlib import Path

from config import Config, get_migrations_dir
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    base_dir = tmp_path / "runway"
    return Config(
        base_dir=base_dir,
        db_data_dir=base_dir / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=base_dir / "logs",
        rules_path=base_dir / "rules.yaml",
        horizon_months=12,
        market_account="market",
        enable_reset=False,
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a database manager over an in-memory database with all migrations applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        A DatabaseManager stand-in that always hands out the same connection.
    """
    run_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            return _TestConnectionContext(self.conn)

        def get_db_path(self):
            return Path(":memory:")

        def get_migrations_dir(self):
            return get_migrations_dir()

    class _TestConnectionContext:
        """Context manager that leaves the shared connection open."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Services container backed by the in-memory test database."""
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def accounts(services):
    """A small chart of accounts: checking, savings, employer, external, market."""
    return {
        "checking": services.accounts.create("checking", "asset"),
        "savings": services.accounts.create("savings", "asset"),
        "employer": services.accounts.create("employer", "income"),
        "external": services.accounts.create("external", "external"),
        "market": services.accounts.create("market", "external"),
    }
