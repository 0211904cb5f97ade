"""Loading recurring rule definitions from YAML files.

A rules file looks like::

    rules:
      - description: Salary
        amount: 5000
        source: employer
        destination: checking
        start_date: 2024-01-01
        schedule:
          period: month
          on: 1
      - description: Groceries
        amount: 150
        source: checking
        destination: external
        start_date: 2024-01-01
        schedule: {period: week, on: friday}

Accounts may be referenced by name or by id. Rules keep their file order,
which is also the order same-day transfers appear in a projection.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, List, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError, model_validator

from forecast.calendar_rule import CalendarRule, build_calendar_rule
from forecast.recurring_rule import RecurringRule
from logger import get_logger

logger = get_logger("forecast")

AccountRef = Union[int, str]
SelectorValue = Union[int, date, str]


class ScheduleDefinition(BaseModel):
    """The calendar part of a rule definition."""

    period: str
    interval: int = 1
    on: Optional[Union[List[SelectorValue], SelectorValue]] = None
    months: Optional[Union[List[Union[int, str]], int, str]] = None
    nth: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _restore_on_key(cls, data):
        # YAML 1.1 reads a bare `on` key as the boolean True
        if isinstance(data, dict) and True in data:
            data = dict(data)
            data.setdefault("on", data.pop(True))
        return data

    def to_calendar_rule(self) -> CalendarRule:
        return build_calendar_rule(
            self.period,
            interval=self.interval,
            on=self.on,
            months=self.months,
            nth=self.nth,
        )


class RuleDefinition(BaseModel):
    """One entry of a rules file."""

    description: str
    amount: Decimal
    source: AccountRef
    destination: AccountRef
    start_date: date
    end_date: Optional[date] = None
    schedule: ScheduleDefinition

    def to_recurring_rule(self, resolve_account: Callable[[AccountRef], int]) -> RecurringRule:
        """Build the RecurringRule, mapping account references to ids.

        Raises:
            InvalidRule: If the schedule or the active window is invalid.
        """
        return RecurringRule(
            calendar_rule=self.schedule.to_calendar_rule(),
            base_amount=self.amount,
            description=self.description,
            source_id=resolve_account(self.source),
            destination_id=resolve_account(self.destination),
            start_date=self.start_date,
            end_date=self.end_date,
        )


class RulesFile(BaseModel):
    rules: List[RuleDefinition] = []


def load_rule_definitions(path: Path) -> List[RuleDefinition]:
    """Read and validate rule definitions from a YAML file.

    Args:
        path: Rules file. A missing file means no rules.

    Returns:
        Rule definitions in file order.

    Raises:
        ValueError: If the file is not valid YAML or doesn't match the schema.
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"No rules file at {path}")
        return []

    logger.info(f"Loading rules from {path}")

    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in rules file {path}: {e}") from e

    if data is None:
        return []

    try:
        return RulesFile.model_validate(data).rules
    except ValidationError as e:
        raise ValueError(f"Invalid rules file {path}: {e}") from e
