"""Tests for recurring rule expansion."""

from datetime import date
from decimal import Decimal

import pytest
from dateutil.relativedelta import relativedelta

from forecast.calendar_rule import monthly, once, weekly
from forecast.errors import InvalidRule
from forecast.recurring_rule import RecurringRule

MAIN = 1
EXPENSES = 2


def make_rule(calendar_rule, amount="500", start=date(2023, 1, 1), end=None, description="Rent"):
    return RecurringRule(
        calendar_rule=calendar_rule,
        base_amount=amount,
        description=description,
        source_id=MAIN,
        destination_id=EXPENSES,
        start_date=start,
        end_date=end,
    )


class TestExpand:
    """Tests for RecurringRule.expand."""

    def test_monthly_rent(self):
        rule = make_rule(monthly(on=1))

        transfers = rule.expand(date(2024, 1, 1), date(2024, 3, 31))

        assert [t.date for t in transfers] == [
            date(2024, 1, 1),
            date(2024, 2, 1),
            date(2024, 3, 1),
        ]
        for transfer in transfers:
            assert transfer.amount == Decimal("500")
            assert transfer.source_id == MAIN
            assert transfer.destination_id == EXPENSES
            assert transfer.description == "Rent"
            assert transfer.id is None

    def test_end_date_cuts_off_later_occurrences(self):
        rule = make_rule(
            monthly(on=5), amount=50, start=date(2024, 1, 1), end=date(2024, 3, 1), description="Gym"
        )

        transfers = rule.expand(date(2024, 1, 1), date(2024, 3, 31))

        assert [t.date for t in transfers] == [date(2024, 1, 5), date(2024, 2, 5)]

    def test_start_date_after_range_start(self):
        rule = make_rule(monthly(on=1), start=date(2024, 2, 15))

        transfers = rule.expand(date(2024, 1, 1), date(2024, 4, 30))

        assert [t.date for t in transfers] == [date(2024, 3, 1), date(2024, 4, 1)]

    def test_occurrence_on_range_boundaries_included(self):
        rule = make_rule(monthly(on=[1, 31]))

        transfers = rule.expand(date(2024, 1, 1), date(2024, 1, 31))

        assert [t.date for t in transfers] == [date(2024, 1, 1), date(2024, 1, 31)]

    def test_empty_when_rule_ended_before_range(self):
        rule = make_rule(monthly(on=1), start=date(2022, 1, 1), end=date(2022, 12, 31))

        assert rule.expand(date(2024, 1, 1), date(2024, 12, 31)) == []

    def test_empty_when_rule_starts_after_range(self):
        rule = make_rule(monthly(on=1), start=date(2025, 1, 1))

        assert rule.expand(date(2024, 1, 1), date(2024, 12, 31)) == []

    def test_empty_when_range_is_inverted(self):
        rule = make_rule(monthly(on=1))

        assert rule.expand(date(2024, 3, 1), date(2024, 2, 1)) == []

    def test_once_rule_yields_at_most_one(self):
        rule = make_rule(once(date(2024, 2, 15)), amount=200, start=date(2024, 1, 1))

        transfers = rule.expand(date(2024, 1, 1), date(2024, 12, 31))

        assert len(transfers) == 1
        assert transfers[0].date == date(2024, 2, 15)

    def test_once_rule_outside_window(self):
        rule = make_rule(once(date(2024, 2, 15)), start=date(2024, 3, 1))

        assert rule.expand(date(2024, 1, 1), date(2024, 12, 31)) == []

    def test_weekly_rule_fills_range(self):
        rule = make_rule(weekly(on="friday"), amount=150, start=date(2024, 1, 1))

        transfers = rule.expand(date(2024, 1, 1), date(2024, 1, 31))

        assert [t.date.day for t in transfers] == [5, 12, 19, 26]

    def test_dates_never_leave_effective_window(self):
        start, end = date(2024, 3, 10), date(2024, 9, 20)
        rule = make_rule(weekly(on=["mon", "thu"]), start=start, end=end)

        for months in range(0, 12):
            range_start = date(2024, 1, 1) + relativedelta(months=months)
            range_end = range_start + relativedelta(months=3)
            transfers = rule.expand(range_start, range_end)

            lower = max(range_start, start)
            upper = min(range_end, end)
            assert all(lower <= t.date <= upper for t in transfers)
            assert [t.date for t in transfers] == sorted(t.date for t in transfers)

    def test_expand_is_repeatable(self):
        rule = make_rule(monthly(on="wednesday", nth=2))

        first = rule.expand(date(2024, 1, 1), date(2024, 12, 31))
        second = rule.expand(date(2024, 1, 1), date(2024, 12, 31))

        assert first == second
        assert len(first) == 12


class TestConstruction:
    def test_amount_stored_as_absolute_decimal(self):
        rule = make_rule(monthly(on=1), amount=-500.10)

        assert rule.base_amount == Decimal("500.1")

    def test_end_before_start_is_invalid(self):
        with pytest.raises(InvalidRule):
            make_rule(monthly(on=1), start=date(2024, 3, 1), end=date(2024, 2, 1))

    def test_end_equal_to_start_is_allowed(self):
        rule = make_rule(monthly(on=1), start=date(2024, 3, 1), end=date(2024, 3, 1))

        assert [t.date for t in rule.expand(date(2024, 1, 1), date(2024, 12, 31))] == [
            date(2024, 3, 1)
        ]

    def test_requires_calendar_rule(self):
        with pytest.raises(InvalidRule):
            make_rule("monthly")


class TestNextOccurrence:
    def test_respects_start_date(self):
        rule = make_rule(monthly(on=1), start=date(2024, 6, 1))

        assert rule.next_occurrence(after=date(2024, 1, 1)) == date(2024, 6, 1)

    def test_after_start_date(self):
        rule = make_rule(monthly(on=1), start=date(2024, 1, 1))

        assert rule.next_occurrence(after=date(2024, 6, 1)) == date(2024, 7, 1)

    def test_none_after_end_date(self):
        rule = make_rule(monthly(on=5), start=date(2024, 1, 1), end=date(2024, 3, 1))

        assert rule.next_occurrence(after=date(2024, 2, 5)) is None
