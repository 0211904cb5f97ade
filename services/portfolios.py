"""Portfolio service: named groups of accounts that are projected together."""

from typing import List, Optional
from models.account import Account
from models.portfolio import AccountSet, Portfolio


class PortfolioService:
    """Service for managing portfolios and their account membership."""

    def __init__(self, db_manager):
        """Initialize the portfolio service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, name: str) -> Portfolio:
        """Create an empty portfolio.

        Raises:
            sqlite3.IntegrityError: If the name is already taken.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("INSERT INTO portfolios (name) VALUES (?)", (name,))
            conn.commit()
            return Portfolio(id=cursor.lastrowid, name=name)

    def find_all(self) -> List[Portfolio]:
        with self.db_manager.connect() as conn:
            rows = conn.execute("SELECT id, name FROM portfolios ORDER BY id").fetchall()
            return [Portfolio(id=row[0], name=row[1]) for row in rows]

    def find(self, portfolio_id: int) -> Optional[Portfolio]:
        with self.db_manager.connect() as conn:
            row = conn.execute(
                "SELECT id, name FROM portfolios WHERE id = ?", (portfolio_id,)
            ).fetchone()
            return Portfolio(id=row[0], name=row[1]) if row else None

    def find_by_name(self, name: str) -> Optional[Portfolio]:
        with self.db_manager.connect() as conn:
            row = conn.execute(
                "SELECT id, name FROM portfolios WHERE name = ?", (name,)
            ).fetchone()
            return Portfolio(id=row[0], name=row[1]) if row else None

    def rename(self, portfolio_id: int, name: str) -> bool:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE portfolios SET name = ? WHERE id = ?", (name, portfolio_id)
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete(self, portfolio_id: int) -> bool:
        """Delete a portfolio and its memberships. Accounts are untouched.

        Returns:
            True if the portfolio was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            conn.execute(
                "DELETE FROM portfolio_accounts WHERE portfolio_id = ?", (portfolio_id,)
            )
            cursor = conn.execute("DELETE FROM portfolios WHERE id = ?", (portfolio_id,))
            conn.commit()
            return cursor.rowcount > 0

    def add_account(self, portfolio_id: int, account_id: int) -> bool:
        """Add an account to a portfolio. Adding it twice is a no-op.

        Returns:
            True if the account was newly added.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT OR IGNORE INTO portfolio_accounts (portfolio_id, account_id)
                VALUES (?, ?)
                """,
                (portfolio_id, account_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def remove_account(self, portfolio_id: int, account_id: int) -> bool:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM portfolio_accounts WHERE portfolio_id = ? AND account_id = ?",
                (portfolio_id, account_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def accounts(self, portfolio_id: int) -> List[Account]:
        """Accounts in a portfolio, in the order they were added."""
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                """
                SELECT a.id, a.name, a.category, a.is_active
                FROM accounts a
                JOIN portfolio_accounts pa ON a.id = pa.account_id
                WHERE pa.portfolio_id = ?
                ORDER BY pa.rowid
                """,
                (portfolio_id,),
            ).fetchall()
            return [
                Account(id=row[0], name=row[1], category=row[2], is_active=bool(row[3]))
                for row in rows
            ]

    def account_set(self, portfolio_id: int) -> AccountSet:
        """The portfolio's accounts as the id set a projection tracks."""
        return AccountSet.from_iterable(account.id for account in self.accounts(portfolio_id))
