"""Calendar recurrence rules.

A rule answers two questions about dates: does a date match the pattern, and
which is the next matching date after a given one. Rules come in five closed
kinds, one class each:

    Once     a single fixed date
    Daily    every day
    Weekly   selected weekdays (or every day when none are selected)
    Monthly  selected days of the month, or the nth weekday of the month
    Yearly   like Monthly, usually restricted to selected months (quarterly is a Yearly)

Monthly and Yearly rules both take an optional month filter.

Weekdays follow Python's numbering (Monday=0 .. Sunday=6) and may also be
given by name. Months are 1..12, full names or three-letter abbreviations.

``interval`` is accepted and kept on every rule but is not applied when
matching: a stride such as "every 2 weeks" needs a reference date that the
calendar pattern does not carry.
"""

import calendar
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import ClassVar, Iterable, Optional, Tuple, Union

from forecast.errors import InvalidRule
from logger import get_logger

logger = get_logger("forecast")

PERIODS = ("day", "week", "month", "year", "once")

# Number of candidate days examined after ``after`` before giving up.
SCAN_LIMIT_DAYS = 365 * 5

LAST = -1

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11,
    "december": 12,
}

WEEKDAYS = {
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3,
    "friday": 4, "saturday": 5, "sunday": 6,
}

QUARTER_MONTHS = ("jan", "apr", "jul", "oct")

Selector = Union[int, str]


def _as_tuple(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


def _weekday(value: Selector) -> int:
    if isinstance(value, bool):
        raise InvalidRule(f"Invalid weekday: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise InvalidRule(f"Weekday must be 0 (Monday) to 6 (Sunday), got {value}")
    if isinstance(value, str):
        key = value.strip().lower()
        for name, number in WEEKDAYS.items():
            if key == name or (len(key) >= 3 and name.startswith(key)):
                return number
    raise InvalidRule(f"Invalid weekday: {value!r}")


def _month(value: Selector) -> int:
    if isinstance(value, bool):
        raise InvalidRule(f"Invalid month: {value!r}")
    if isinstance(value, int):
        if 1 <= value <= 12:
            return value
        raise InvalidRule(f"Month must be 1 to 12, got {value}")
    if isinstance(value, str):
        key = value.strip().lower()
        for name, number in MONTHS.items():
            if key == name or key == name[:3]:
                return number
    raise InvalidRule(f"Invalid month: {value!r}")


def _day_of_month(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 31:
        return value
    raise InvalidRule(f"Day of month must be 1 to 31, got {value!r}")


@dataclass(frozen=True, kw_only=True)
class CalendarRule(ABC):
    """Base class for the five rule kinds."""

    period: ClassVar[str]

    interval: int = 1

    def __post_init__(self):
        if isinstance(self.interval, bool) or not isinstance(self.interval, int):
            raise InvalidRule(f"Interval must be an integer, got {self.interval!r}")
        if self.interval < 1:
            raise InvalidRule(f"Interval must be at least 1, got {self.interval}")

    @abstractmethod
    def matches(self, day: date) -> bool:
        """Return True if ``day`` satisfies this rule."""

    def next_occurrence(self, after: date) -> Optional[date]:
        """Return the first matching date strictly after ``after``.

        Scans forward one day at a time for at most SCAN_LIMIT_DAYS days and
        returns None when nothing matches within that bound.
        """
        candidate = after + timedelta(days=1)
        for _ in range(SCAN_LIMIT_DAYS + 1):
            if self.matches(candidate):
                return candidate
            candidate += timedelta(days=1)
        return None

    def to_dict(self) -> dict:
        return {"period": self.period, "interval": self.interval}


@dataclass(frozen=True, kw_only=True)
class Once(CalendarRule):
    period: ClassVar[str] = "once"

    on: date

    def __post_init__(self):
        super().__post_init__()
        on = self.on
        if isinstance(on, str):
            try:
                on = date.fromisoformat(on)
            except ValueError as e:
                raise InvalidRule(f"Invalid date for once rule: {self.on!r}") from e
        if isinstance(on, datetime):
            on = on.date()
        if not isinstance(on, date):
            raise InvalidRule("A once rule requires a concrete date")
        object.__setattr__(self, "on", on)

    def matches(self, day: date) -> bool:
        return day == self.on

    def next_occurrence(self, after: date) -> Optional[date]:
        return self.on if self.on > after else None

    def to_dict(self) -> dict:
        return {**super().to_dict(), "on": self.on.isoformat()}


@dataclass(frozen=True, kw_only=True)
class Daily(CalendarRule):
    period: ClassVar[str] = "day"

    def matches(self, day: date) -> bool:
        return True


@dataclass(frozen=True, kw_only=True)
class Weekly(CalendarRule):
    """Matches the selected weekdays; an empty selection matches every day."""

    period: ClassVar[str] = "week"

    on: Tuple[int, ...] = ()

    def __post_init__(self):
        super().__post_init__()
        weekdays = sorted({_weekday(value) for value in _as_tuple(self.on)})
        object.__setattr__(self, "on", tuple(weekdays))

    def matches(self, day: date) -> bool:
        if not self.on:
            return True
        return day.weekday() in self.on

    def to_dict(self) -> dict:
        return {**super().to_dict(), "on": list(self.on)}


@dataclass(frozen=True, kw_only=True)
class _DayOfMonthRule(CalendarRule):
    """Shared day rule for Monthly and Yearly.

    Without ``nth`` the selector holds days of the month. With ``nth`` it
    holds exactly one weekday and the date must be that weekday's nth
    occurrence in its month (LAST for the final one).

    ``months`` filters first: None means every month, an empty tuple means
    no month at all.
    """

    on: Tuple[int, ...] = ()
    nth: Optional[int] = None
    months: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        super().__post_init__()
        if self.months is not None:
            months = sorted({_month(value) for value in _as_tuple(self.months)})
            object.__setattr__(self, "months", tuple(months))

        values = _as_tuple(self.on)
        if not values:
            raise InvalidRule(f"A {self.period} rule requires at least one day")

        if self.nth is None:
            days = sorted({_day_of_month(value) for value in values})
            object.__setattr__(self, "on", tuple(days))
            return

        if isinstance(self.nth, bool) or self.nth not in (1, 2, 3, 4, 5, LAST):
            raise InvalidRule(f"nth must be 1 to 5 or -1 (last), got {self.nth!r}")
        if len(values) != 1:
            raise InvalidRule("An nth rule takes exactly one weekday")
        object.__setattr__(self, "on", (_weekday(values[0]),))

    def matches(self, day: date) -> bool:
        if self.months is not None and day.month not in self.months:
            return False
        if self.nth is None:
            return day.day in self.on

        if day.weekday() != self.on[0]:
            return False
        if self.nth == LAST:
            days_in_month = calendar.monthrange(day.year, day.month)[1]
            return day.day + 7 > days_in_month
        return (day.day - 1) // 7 + 1 == self.nth

    def to_dict(self) -> dict:
        months = list(self.months) if self.months is not None else None
        return {**super().to_dict(), "on": list(self.on), "nth": self.nth, "months": months}


@dataclass(frozen=True, kw_only=True)
class Monthly(_DayOfMonthRule):
    period: ClassVar[str] = "month"


@dataclass(frozen=True, kw_only=True)
class Yearly(_DayOfMonthRule):
    """Day rule normally given a month filter, such as a quarterly payment."""

    period: ClassVar[str] = "year"


_RULE_CLASSES = {
    "once": Once,
    "day": Daily,
    "week": Weekly,
    "month": Monthly,
    "year": Yearly,
}


def once(on: Union[date, str]) -> Once:
    return Once(on=on)


def daily(interval: int = 1) -> Daily:
    return Daily(interval=interval)


def weekly(on: Union[Selector, Iterable[Selector]] = (), interval: int = 1) -> Weekly:
    return Weekly(on=_as_tuple(on), interval=interval)


def monthly(
    on: Union[Selector, Iterable[Selector]],
    interval: int = 1,
    nth: Optional[int] = None,
    months: Optional[Iterable[Selector]] = None,
) -> Monthly:
    """Monthly rule, e.g. ``monthly(on=[5, 20])`` or ``monthly(on="wednesday", nth=2)``."""
    months = _as_tuple(months) if months is not None else None
    return Monthly(on=_as_tuple(on), interval=interval, nth=nth, months=months)


def quarterly(
    on: Union[Selector, Iterable[Selector]],
    months: Iterable[Selector] = QUARTER_MONTHS,
    nth: Optional[int] = None,
) -> Yearly:
    return Yearly(on=_as_tuple(on), months=_as_tuple(months), nth=nth)


def yearly(
    on: Union[Selector, Iterable[Selector]],
    months: Optional[Iterable[Selector]] = None,
    nth: Optional[int] = None,
) -> Yearly:
    months = _as_tuple(months) if months is not None else None
    return Yearly(on=_as_tuple(on), months=months, nth=nth)


def build_calendar_rule(
    period: str,
    interval: int = 1,
    on=None,
    months=None,
    nth: Optional[int] = None,
) -> CalendarRule:
    """Build a rule from loose fields, as read from a file or the command line.

    Args:
        period: One of PERIODS.
        interval: Stride, kept but not applied.
        on: Selector: a date for "once", weekdays for "week", days of the
            month (or a single weekday with ``nth``) for "month" and "year".
        months: Month filter for "month" and "year"; ignored elsewhere.
        nth: Occurrence of the weekday in the month, 1..5 or -1 for last.

    Returns:
        The matching CalendarRule subclass instance.

    Raises:
        InvalidRule: If the period is unknown, a "once" rule has no single
            date, or a selector value is out of range.

    Fields that don't apply to the period (a month filter on a weekly rule,
    a selector on a daily rule) are ignored with a warning.
    """
    kind = str(period).strip().lower()
    rule_class = _RULE_CLASSES.get(kind)
    if rule_class is None:
        raise InvalidRule(
            f"Invalid period {period!r}; expected one of {', '.join(PERIODS)}"
        )

    if rule_class not in (Monthly, Yearly):
        if months is not None:
            logger.warning(f"Ignoring month filter on {kind} rule")
        if nth is not None:
            logger.warning(f"Ignoring nth on {kind} rule")

    if rule_class is Once:
        values = _as_tuple(on)
        if len(values) != 1:
            raise InvalidRule("A once rule requires exactly one date")
        return Once(on=values[0], interval=interval)
    if rule_class is Daily:
        if _as_tuple(on):
            logger.warning("Ignoring day selector on day rule")
        return Daily(interval=interval)
    if rule_class is Weekly:
        return Weekly(on=_as_tuple(on), interval=interval)
    months = _as_tuple(months) if months is not None else None
    if rule_class is Monthly:
        return Monthly(on=_as_tuple(on), interval=interval, nth=nth, months=months)
    return Yearly(
        on=_as_tuple(on),
        interval=interval,
        nth=nth,
        months=months,
    )
