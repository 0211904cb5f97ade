"""Helper utilities for tests."""

from decimal import Decimal
from pathlib import Path
import sqlite3


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        with open(migration_file, "r") as f:
            conn.executescript(f.read())

    conn.commit()


class FakeLedger:
    """In-memory ledger with fixed balances per account."""

    def __init__(self, balances=None):
        self.balances = {k: Decimal(str(v)) for k, v in (balances or {}).items()}
        self.calls = []

    def balance(self, account_id):
        self.calls.append(account_id)
        return self.balances.get(account_id, Decimal("0"))


class BrokenLedger:
    """Ledger whose storage is unavailable."""

    def __init__(self, error=None):
        self.error = error or sqlite3.OperationalError("unable to open database file")

    def balance(self, account_id):
        raise self.error
