"""Rule service: recurring rules declared in the rules file."""

from pathlib import Path
from typing import List, Optional, Union

from forecast.loader import load_rule_definitions
from forecast.recurring_rule import RecurringRule
from logger import get_logger

logger = get_logger()


class RuleService:
    """Loads recurring rules and resolves the accounts they reference."""

    def __init__(self, config, accounts):
        """Initialize the rule service.

        Args:
            config: Application configuration (provides the default rules path).
            accounts: AccountService used to resolve account names.
        """
        self.config = config
        self.accounts = accounts

    def load(self, path: Optional[Path] = None) -> List[RecurringRule]:
        """Load every rule from a rules file.

        Args:
            path: Rules file; defaults to the configured rules_path.

        Returns:
            RecurringRule objects in declaration order.

        Raises:
            ValueError: If the file is malformed or names an unknown account.
            InvalidRule: If a rule's schedule or window is invalid.
        """
        path = path or self.config.rules_path
        definitions = load_rule_definitions(path)
        rules = [definition.to_recurring_rule(self._resolve_account) for definition in definitions]
        logger.info(f"Loaded {len(rules)} recurring rule(s)")
        return rules

    def _resolve_account(self, reference: Union[int, str]) -> int:
        if isinstance(reference, int):
            account = self.accounts.find(reference)
        else:
            account = self.accounts.find_by_name(reference)

        if account is None:
            raise ValueError(f"Rule references unknown account '{reference}'")
        return account.id
