"""Account service for database operations."""

from typing import List, Optional
from models.account import ACCOUNT_CATEGORIES, Account

_ACCOUNT_SELECT_FIELDS = "id, name, category, is_active"


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db_manager):
        """Initialize the account service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self, include_archived: bool = False) -> List[Account]:
        """Get accounts from the database.

        Args:
            include_archived: Also return archived (inactive) accounts.

        Returns:
            List of Account objects, ordered by id.
        """
        query = f"SELECT {_ACCOUNT_SELECT_FIELDS} FROM accounts"
        if not include_archived:
            query += " WHERE is_active = 1"
        query += " ORDER BY id"

        with self.db_manager.connect() as conn:
            rows = conn.execute(query).fetchall()
            return [self._row_to_account(row) for row in rows]

    def find(self, account_id: int) -> Optional[Account]:
        """Get a single account by ID, archived or not.

        Returns:
            Account object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_ACCOUNT_SELECT_FIELDS} FROM accounts WHERE id = ?",
                (account_id,),
            ).fetchone()
            return self._row_to_account(row) if row else None

    def find_by_name(self, name: str) -> Optional[Account]:
        """Get a single account by its (case-sensitive) name.

        Returns:
            Account object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_ACCOUNT_SELECT_FIELDS} FROM accounts WHERE name = ?",
                (name,),
            ).fetchone()
            return self._row_to_account(row) if row else None

    def create(self, name: str, category: str) -> Account:
        """Create a new active account.

        Args:
            name: Account name (must be unique).
            category: One of asset, liability, income, expense, external.

        Returns:
            The created Account object with id populated.

        Raises:
            ValueError: If the category is not recognized.
            sqlite3.IntegrityError: If the name is already taken.
        """
        self._validate_category(category)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO accounts (name, category, is_active) VALUES (?, ?, 1)",
                (name, category),
            )
            conn.commit()
            return Account(id=cursor.lastrowid, name=name, category=category)

    def update(self, account_id: int, name: Optional[str] = None, category: Optional[str] = None) -> bool:
        """Rename and/or recategorize an account.

        Fields left as None keep their current value.

        Returns:
            True if the account exists and was updated.
        """
        current = self.find(account_id)
        if current is None:
            return False
        if category is not None:
            self._validate_category(category)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE accounts SET name = ?, category = ? WHERE id = ?",
                (name or current.name, category or current.category, account_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def archive(self, account_id: int) -> bool:
        """Mark an account inactive. Its transfers are kept."""
        return self._set_active(account_id, False)

    def restore(self, account_id: int) -> bool:
        """Mark an archived account active again."""
        return self._set_active(account_id, True)

    def delete(self, account_id: int) -> bool:
        """Delete an account that no transfer references.

        Returns:
            True if account was deleted, False if not found.

        Raises:
            ValueError: If transfers reference the account; archive it instead.
        """
        with self.db_manager.connect() as conn:
            count = conn.execute(
                """
                SELECT COUNT(*) FROM transfers
                WHERE source_account_id = ? OR destination_account_id = ?
                """,
                (account_id, account_id),
            ).fetchone()[0]
            if count > 0:
                raise ValueError(
                    "Cannot delete account with existing transfers. Archive it instead."
                )

            conn.execute(
                "DELETE FROM portfolio_accounts WHERE account_id = ?", (account_id,)
            )
            cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _set_active(self, account_id: int, active: bool) -> bool:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE accounts SET is_active = ? WHERE id = ?",
                (1 if active else 0, account_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    @staticmethod
    def _validate_category(category: str) -> None:
        if category not in ACCOUNT_CATEGORIES:
            raise ValueError(
                f"Invalid account category '{category}'. "
                f"Must be one of: {', '.join(ACCOUNT_CATEGORIES)}"
            )

    @staticmethod
    def _row_to_account(row) -> Account:
        return Account(id=row[0], name=row[1], category=row[2], is_active=bool(row[3]))
