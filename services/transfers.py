"""Transfer service: the ledger of recorded money movements."""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from models.transfer import TaxInfo, Transfer, as_amount
from logger import get_logger

logger = get_logger()

_TRANSFER_SELECT_FIELDS = """id, description, amount, date, is_taxable,
       federal_tax_rate, state_tax_rate, source_account_id, destination_account_id"""

_TRANSFER_WRITE_FIELDS = (
    "description",
    "amount",
    "date",
    "is_taxable",
    "federal_tax_rate",
    "state_tax_rate",
    "source_account_id",
    "destination_account_id",
)

# Valuations closer than this to the current balance are not recorded
VALUATION_TOLERANCE = Decimal("0.01")


class TransferService:
    """Service for recording transfers and reading balances."""

    def __init__(self, db_manager):
        """Initialize the transfer service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, transfer: Transfer) -> Transfer:
        """Persist a transfer.

        Args:
            transfer: Transfer to insert; its id is ignored.

        Returns:
            A copy of the transfer with the new id.

        Raises:
            sqlite3.IntegrityError: If either account doesn't exist.
        """
        placeholders = ", ".join(["?"] * len(_TRANSFER_WRITE_FIELDS))
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                INSERT INTO transfers ({", ".join(_TRANSFER_WRITE_FIELDS)})
                VALUES ({placeholders})
                """,
                self._to_row(transfer),
            )
            conn.commit()
            transfer_id = cursor.lastrowid

        logger.debug(f"Recorded transfer {transfer_id}: {transfer.description}")
        return transfer.with_id(transfer_id)

    def find(self, transfer_id: int) -> Optional[Transfer]:
        """Get a single transfer by ID, or None if it doesn't exist."""
        with self.db_manager.connect() as conn:
            row = conn.execute(
                f"SELECT {_TRANSFER_SELECT_FIELDS} FROM transfers WHERE id = ?",
                (transfer_id,),
            ).fetchone()

        return self._row_to_transfer(row) if row else None

    def update(self, transfer_id: int, transfer: Transfer) -> bool:
        """Replace every stored field of a transfer.

        Returns:
            True if the transfer existed and was updated.
        """
        set_clause = ", ".join(f"{field} = ?" for field in _TRANSFER_WRITE_FIELDS)
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"UPDATE transfers SET {set_clause} WHERE id = ?",
                (*self._to_row(transfer), transfer_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete(self, transfer_id: int) -> bool:
        """Delete a transfer by ID.

        Returns:
            True if transfer was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM transfers WHERE id = ?", (transfer_id,))
            conn.commit()
            return cursor.rowcount > 0

    def balance(self, account_id: int) -> Decimal:
        """Current balance of an account.

        Money received minus money sent, over every recorded transfer.
        Accounts without transfers have a balance of 0.
        """
        with self.db_manager.connect() as conn:
            rows = conn.execute(
                """
                SELECT amount, source_account_id, destination_account_id
                FROM transfers
                WHERE source_account_id = ? OR destination_account_id = ?
                """,
                (account_id, account_id),
            ).fetchall()

        balance = Decimal("0")
        for amount, source_id, destination_id in rows:
            if destination_id == account_id:
                balance += as_amount(amount)
            if source_id == account_id:
                balance -= as_amount(amount)
        return balance

    def recent(self, limit: int = 10, account_id: Optional[int] = None) -> List[Transfer]:
        """Most recent transfers, newest first.

        Args:
            limit: Maximum number of transfers to return.
            account_id: If given, only transfers into or out of this account.

        Returns:
            List of Transfer objects ordered by date descending, then id descending.
        """
        query = f"SELECT {_TRANSFER_SELECT_FIELDS} FROM transfers"
        params = []

        if account_id is not None:
            query += " WHERE source_account_id = ? OR destination_account_id = ?"
            params.extend([account_id, account_id])

        query += " ORDER BY date DESC, id DESC LIMIT ?"
        params.append(limit)

        with self.db_manager.connect() as conn:
            rows = conn.execute(query, params).fetchall()

        return [self._row_to_transfer(row) for row in rows]

    def record_valuation(
        self,
        account_id: int,
        value,
        on_date: date,
        market_account_id: int,
    ) -> Optional[Transfer]:
        """Bring an account's balance to a stated market value.

        The difference between ``value`` and the current balance is recorded
        as a transfer from the market account (appreciation) or to it
        (depreciation).

        Args:
            account_id: Account that was valued.
            value: Its value as of ``on_date``.
            on_date: Date of the adjustment transfer.
            market_account_id: Counterparty for market adjustments.

        Returns:
            The recorded adjustment, or None if the value is unchanged.
        """
        delta = as_amount(value) - self.balance(account_id)

        if abs(delta) < VALUATION_TOLERANCE:
            logger.info(f"Valuation of account {account_id} unchanged, nothing recorded")
            return None

        if delta > 0:
            source_id, destination_id = market_account_id, account_id
            description = "Market Adjustment (Appreciation)"
        else:
            source_id, destination_id = account_id, market_account_id
            description = "Market Adjustment (Depreciation)"

        return self.create(
            Transfer(
                amount=abs(delta),
                date=on_date,
                description=description,
                source_id=source_id,
                destination_id=destination_id,
            )
        )

    @staticmethod
    def _to_row(transfer: Transfer) -> tuple:
        tax = transfer.tax_info
        return (
            transfer.description,
            float(transfer.amount),
            transfer.date.isoformat(),
            1 if tax.is_taxable else 0,
            float(tax.federal_tax_rate),
            float(tax.state_tax_rate),
            transfer.source_id,
            transfer.destination_id,
        )

    @staticmethod
    def _row_to_transfer(row) -> Transfer:
        return Transfer(
            id=row[0],
            description=row[1],
            amount=as_amount(row[2]),
            date=date.fromisoformat(row[3]),
            tax_info=TaxInfo(
                is_taxable=bool(row[4]),
                federal_tax_rate=as_amount(row[5]),
                state_tax_rate=as_amount(row[6]),
            ),
            source_id=row[7],
            destination_id=row[8],
        )
