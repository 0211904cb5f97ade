from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Union

Number = Union[int, float, str, Decimal]

INFLOW = "inflow"
OUTFLOW = "outflow"
NEUTRAL = "neutral"


def as_amount(value: Number) -> Decimal:
    """Convert a number to Decimal without float artifacts (0.1 -> Decimal("0.1"))."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class TaxInfo:
    """Tax annotation carried on a transfer. Stored and displayed only."""

    is_taxable: bool = False
    federal_tax_rate: Decimal = Decimal("0")
    state_tax_rate: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "is_taxable": self.is_taxable,
            "federal_tax_rate": float(self.federal_tax_rate),
            "state_tax_rate": float(self.state_tax_rate),
        }


@dataclass(frozen=True)
class Transfer:
    """A movement of money between two accounts on a date.

    ``amount`` is always stored as an absolute value; direction is encoded only
    by ``source_id`` -> ``destination_id``. ``id`` is None for transfers that
    were never persisted, such as those expanded from a recurring rule.
    """

    amount: Decimal
    date: date
    description: str
    source_id: int
    destination_id: int
    tax_info: TaxInfo = field(default_factory=TaxInfo)
    id: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "amount", abs(as_amount(self.amount)))

    def value_for(self, account_id: int) -> Decimal:
        """Signed effect of this transfer on ``account_id``.

        A transfer from an account to itself moves nothing and is worth 0.
        """
        if self.source_id == self.destination_id:
            return Decimal("0")
        if self.source_id == account_id:
            return -self.amount
        if self.destination_id == account_id:
            return self.amount
        return Decimal("0")

    def type_for(self, account_id: int) -> str:
        """Classify this transfer from the point of view of ``account_id``."""
        if self.source_id == account_id:
            return OUTFLOW
        if self.destination_id == account_id:
            return INFLOW
        return NEUTRAL

    def with_id(self, transfer_id: int) -> "Transfer":
        return Transfer(
            amount=self.amount,
            date=self.date,
            description=self.description,
            source_id=self.source_id,
            destination_id=self.destination_id,
            tax_info=self.tax_info,
            id=transfer_id,
        )

    def to_dict(self) -> dict:
        """Convert transfer to dictionary for display or JSON output."""
        return {
            "id": self.id,
            "amount": float(self.amount),
            "date": self.date.isoformat(),
            "description": self.description,
            "source_id": self.source_id,
            "destination_id": self.destination_id,
            "tax_info": self.tax_info.to_dict(),
        }
