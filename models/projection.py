from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List


@dataclass(frozen=True)
class ProjectionEntry:
    """One line of a projected timeline."""

    date: date
    amount: Decimal  # signed impact on the tracked accounts
    balance: Decimal  # running balance after this entry
    description: str
    type: str  # 'inflow', 'outflow' or 'neutral'

    def to_dict(self) -> dict:
        """Convert entry to the chart-friendly dictionary shape."""
        return {
            "date": self.date.isoformat(),
            "amount": float(self.amount),
            "balance": float(self.balance),
            "description": self.description,
            "type": self.type,
        }


@dataclass
class Projection:
    """A projected timeline together with the window and balance it started from."""

    start_date: date
    end_date: date
    starting_balance: Decimal
    entries: List[ProjectionEntry] = field(default_factory=list)

    @property
    def ending_balance(self) -> Decimal:
        if not self.entries:
            return self.starting_balance
        return self.entries[-1].balance

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "starting_balance": float(self.starting_balance),
            "ending_balance": float(self.ending_balance),
            "timeline": [entry.to_dict() for entry in self.entries],
        }
