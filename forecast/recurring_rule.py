"""Recurring rules: a calendar pattern bound to an amount, accounts and a window."""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from forecast.calendar_rule import CalendarRule
from forecast.errors import InvalidRule
from models.transfer import Transfer, as_amount


@dataclass(frozen=True)
class RecurringRule:
    """A transfer that repeats on a calendar pattern while the rule is active.

    Attributes:
        calendar_rule: When the transfer happens.
        base_amount: Absolute magnitude of each transfer.
        description: Copied onto every expanded transfer.
        source_id: Account the money leaves.
        destination_id: Account the money enters.
        start_date: First day the rule is active.
        end_date: Last day the rule is active, or None for open-ended rules.
    """

    calendar_rule: CalendarRule
    base_amount: Decimal
    description: str
    source_id: int
    destination_id: int
    start_date: date
    end_date: Optional[date] = None

    def __post_init__(self):
        if not isinstance(self.calendar_rule, CalendarRule):
            raise InvalidRule(
                f"Expected a CalendarRule, got {type(self.calendar_rule).__name__}"
            )
        object.__setattr__(self, "base_amount", abs(as_amount(self.base_amount)))
        if self.end_date is not None and self.end_date < self.start_date:
            raise InvalidRule(
                f"Rule '{self.description}' ends ({self.end_date}) "
                f"before it starts ({self.start_date})"
            )

    def active_window(self, range_start: date, range_end: date):
        """Intersect ``[range_start, range_end]`` with the rule's active window.

        Returns:
            (start, end) tuple, or None if the two windows don't overlap.
        """
        effective_start = max(range_start, self.start_date)
        effective_end = range_end
        if self.end_date is not None:
            effective_end = min(effective_end, self.end_date)

        if effective_start > effective_end:
            return None
        return effective_start, effective_end

    def expand(self, range_start: date, range_end: date) -> List[Transfer]:
        """Materialize every occurrence inside the requested range.

        Args:
            range_start: First day of the range (inclusive).
            range_end: Last day of the range (inclusive).

        Returns:
            Unsaved transfers (id is None) in ascending date order. Empty when
            the range and the rule's active window don't overlap.
        """
        window = self.active_window(range_start, range_end)
        if window is None:
            return []
        effective_start, effective_end = window

        transfers = []
        cursor = effective_start - timedelta(days=1)
        while True:
            occurrence = self.calendar_rule.next_occurrence(after=cursor)
            if occurrence is None or occurrence > effective_end:
                break
            if occurrence >= effective_start:
                transfers.append(self._transfer_on(occurrence))
            cursor = occurrence

        return transfers

    def next_occurrence(self, after: date) -> Optional[date]:
        """First occurrence strictly after ``after`` that falls inside the active window."""
        cursor = max(after, self.start_date - timedelta(days=1))
        occurrence = self.calendar_rule.next_occurrence(after=cursor)
        if occurrence is None:
            return None
        if self.end_date is not None and occurrence > self.end_date:
            return None
        return occurrence

    def _transfer_on(self, occurrence: date) -> Transfer:
        return Transfer(
            amount=self.base_amount,
            date=occurrence,
            description=self.description,
            source_id=self.source_id,
            destination_id=self.destination_id,
        )

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": float(self.base_amount),
            "source_id": self.source_id,
            "destination_id": self.destination_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "schedule": self.calendar_rule.to_dict(),
        }
