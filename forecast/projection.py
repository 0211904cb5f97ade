"""Projection of future balances from recurring rules.

The builder reads the current balance of the tracked accounts once, expands
every rule over the projection window, and walks the resulting transfers in
date order keeping a running balance. Transfers that stay inside the tracked
account set net to zero and don't appear in the timeline.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from forecast.errors import ProjectionUnavailable
from forecast.recurring_rule import RecurringRule
from logger import get_logger
from models.portfolio import AccountSet
from models.projection import Projection, ProjectionEntry
from models.transfer import INFLOW, NEUTRAL, OUTFLOW, Transfer

logger = get_logger("forecast")


def classify(impact: Decimal) -> str:
    if impact > 0:
        return INFLOW
    if impact < 0:
        return OUTFLOW
    return NEUTRAL


def projection_end_date(as_of: date, horizon_months: int) -> date:
    """Last day covered by a projection of ``horizon_months`` starting ``as_of``.

    A 12-month projection from Jan 1 ends on Dec 31 of the same year.
    """
    return as_of + relativedelta(months=horizon_months) - timedelta(days=1)


def net_impact(transfer: Transfer, accounts: AccountSet) -> Decimal:
    """Signed effect of ``transfer`` on the tracked accounts as a whole."""
    return sum((transfer.value_for(account_id) for account_id in accounts), Decimal("0"))


class ProjectionBuilder:
    """Builds running-balance timelines for a set of accounts.

    Args:
        ledger: Anything with a ``balance(account_id) -> Decimal`` method,
            normally the TransferService.
    """

    def __init__(self, ledger):
        self.ledger = ledger

    def starting_balance(self, accounts: Iterable[int]) -> Decimal:
        """Sum of the current balances of ``accounts``.

        Raises:
            ProjectionUnavailable: If the ledger can't be read.
        """
        accounts = AccountSet.from_iterable(accounts)
        try:
            balances = [self.ledger.balance(account_id) for account_id in accounts]
        except Exception as e:
            logger.error(f"Could not read balances for accounts {list(accounts)}: {e}")
            raise ProjectionUnavailable(f"Balance unavailable: {e}") from e

        return sum(balances, Decimal("0"))

    def project(
        self,
        accounts: Iterable[int],
        rules: Sequence[RecurringRule],
        horizon_months: int = 12,
        as_of: Optional[date] = None,
    ) -> Projection:
        """Project the balance of ``accounts`` over the next ``horizon_months``.

        Args:
            accounts: Tracked account ids (an AccountSet or any iterable).
            rules: Recurring rules to expand. Transfers on the same date keep
                the order of the rules they came from.
            horizon_months: Length of the window in months; 0 gives an empty timeline.
            as_of: First day of the window, today if omitted.

        Returns:
            Projection with the window, the starting balance and the timeline.

        Raises:
            ValueError: If horizon_months is negative.
            ProjectionUnavailable: If the starting balance can't be read.
        """
        if horizon_months < 0:
            raise ValueError(f"horizon_months must not be negative, got {horizon_months}")

        accounts = AccountSet.from_iterable(accounts)
        as_of = as_of or date.today()
        end_date = projection_end_date(as_of, horizon_months)

        starting_balance = self.starting_balance(accounts)

        transfers = self._expand_all(rules, as_of, end_date)

        running_balance = starting_balance
        entries = []
        for transfer in transfers:
            impact = net_impact(transfer, accounts)
            if impact == 0:
                continue

            running_balance += impact
            entries.append(
                ProjectionEntry(
                    date=transfer.date,
                    amount=impact,
                    balance=running_balance,
                    description=transfer.description,
                    type=classify(impact),
                )
            )

        logger.debug(
            f"Projected {len(accounts)} account(s) from {as_of} to {end_date}: "
            f"{len(transfers)} transfer(s) from {len(rules)} rule(s), "
            f"{len(entries)} timeline entries"
        )

        return Projection(
            start_date=as_of,
            end_date=end_date,
            starting_balance=starting_balance,
            entries=entries,
        )

    def build(
        self,
        accounts: Iterable[int],
        rules: Sequence[RecurringRule],
        horizon_months: int = 12,
        as_of: Optional[date] = None,
    ) -> List[ProjectionEntry]:
        """Like project(), returning only the timeline entries."""
        return self.project(accounts, rules, horizon_months, as_of).entries

    @staticmethod
    def _expand_all(
        rules: Sequence[RecurringRule], start: date, end: date
    ) -> List[Transfer]:
        keyed: List[Tuple[date, int, int, Transfer]] = []
        for rule_index, rule in enumerate(rules):
            for position, transfer in enumerate(rule.expand(start, end)):
                keyed.append((transfer.date, rule_index, position, transfer))

        # (date, rule declaration order, expansion order) is unique per transfer
        keyed.sort(key=lambda item: item[:3])
        return [item[3] for item in keyed]
