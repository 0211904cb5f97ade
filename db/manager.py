"""SQLite connections and schema migrations for the ledger database."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Tuple
from config import Config, get_migrations_dir
from logger import get_logger

logger = get_logger("db")


class DatabaseManager:
    """Opens connections to the ledger database and keeps its schema current.

    Migrations are the ``NNN_name.sql`` files in the migrations directory,
    applied in file-name order. Each applied file is recorded in the
    ``schema_migrations`` table and never runs twice.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Foreign keys are enforced on every connection so transfers and
        portfolio memberships cannot point at missing accounts.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()

    def available_migrations(self) -> List[str]:
        """Migration file names shipped with the code, in apply order."""
        migrations_dir = self.get_migrations_dir()
        if not migrations_dir.exists():
            return []
        return sorted(path.name for path in migrations_dir.glob("*.sql"))

    def migration_status(self) -> List[Tuple[str, bool]]:
        """Each available migration paired with whether it has been applied."""
        with self.connect() as conn:
            applied = self._applied(conn)
        return [(name, name in applied) for name in self.available_migrations()]

    def migrate(self) -> List[str]:
        """Apply every pending migration.

        Returns:
            Names of the migrations applied by this call, possibly empty.

        Raises:
            sqlite3.Error: If a migration fails. Earlier migrations in the
                same call stay applied.
        """
        applied_now = []
        with self.connect() as conn:
            applied = self._applied(conn)
            for name in self.available_migrations():
                if name in applied:
                    continue
                self._apply(conn, name)
                applied_now.append(name)
        return applied_now

    def _applied(self, conn) -> set:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_migrations (
                migration_file TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
        rows = conn.execute("SELECT migration_file FROM schema_migrations").fetchall()
        return {row[0] for row in rows}

    def _apply(self, conn, name: str) -> None:
        sql = (self.get_migrations_dir() / name).read_text()
        try:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_migrations (migration_file) VALUES (?)", (name,)
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Error applying migration {name}: {e}")
            raise
        logger.info(f"Applied migration: {name}")
