"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    Tests inject a database manager backed by an in-memory connection; the
    CLI lets the container build one from the config.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config
            is still used for non-database settings.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.accounts import AccountService
        from services.transfers import TransferService
        from services.portfolios import PortfolioService
        from services.rules import RuleService
        from forecast.projection import ProjectionBuilder

        self.accounts = AccountService(self.db_manager)
        self.transfers = TransferService(self.db_manager)
        self.portfolios = PortfolioService(self.db_manager)
        self.rules = RuleService(config, self.accounts)
        self.projections = ProjectionBuilder(self.transfers)
