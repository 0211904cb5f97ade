"""Recurrence and projection engine.

Calendar rules decide which dates a pattern hits, recurring rules turn them
into transfers inside an active window, and the projection builder folds those
transfers into a running-balance timeline.
"""

from forecast.calendar_rule import (
    CalendarRule,
    Daily,
    Monthly,
    Once,
    Weekly,
    Yearly,
    build_calendar_rule,
    daily,
    monthly,
    once,
    quarterly,
    weekly,
    yearly,
)
from forecast.errors import InvalidRule, ProjectionUnavailable
from forecast.projection import ProjectionBuilder
from forecast.recurring_rule import RecurringRule

__all__ = [
    "CalendarRule",
    "Daily",
    "InvalidRule",
    "Monthly",
    "Once",
    "ProjectionBuilder",
    "ProjectionUnavailable",
    "RecurringRule",
    "Weekly",
    "Yearly",
    "build_calendar_rule",
    "daily",
    "monthly",
    "once",
    "quarterly",
    "weekly",
    "yearly",
]
