"""Helpers shared by CLI subcommands."""

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from logger import get_logger

logger = get_logger()


def parse_date(value: str) -> date:
    """argparse type for ISO dates (YYYY-MM-DD)."""
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}'. Use YYYY-MM-DD.") from e


def parse_amount(value: str) -> Decimal:
    """argparse type for money amounts."""
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"Invalid amount '{value}'") from e


def require_account(services, name: str):
    """Look up an account by name, exiting with an error if it doesn't exist."""
    account = services.accounts.find_by_name(name)
    if account is None:
        logger.error(f"Account '{name}' not found.")
        logger.info("Use 'python -m cli accounts list' to see available accounts.")
        sys.exit(1)
    return account


def require_portfolio(services, name: str):
    """Look up a portfolio by name, exiting with an error if it doesn't exist."""
    portfolio = services.portfolios.find_by_name(name)
    if portfolio is None:
        logger.error(f"Portfolio '{name}' not found.")
        logger.info("Use 'python -m cli portfolios list' to see available portfolios.")
        sys.exit(1)
    return portfolio


def format_money(amount: Decimal) -> str:
    return f"{amount:,.2f}"
