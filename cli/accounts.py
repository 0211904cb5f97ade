#!/usr/bin/env python3

import sqlite3
import sys
from datetime import date
from cli.common import format_money, parse_amount, parse_date, require_account
from models.account import ACCOUNT_CATEGORIES
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List accounts with their current balances."""
    accounts = services.accounts.find_all(include_archived=args.all)

    if not accounts:
        logger.info("No accounts found.")
        return

    logger.info("\nAccounts:")
    logger.info("=" * 80)
    for account in accounts:
        status = "" if account.is_active else "  [archived]"
        balance = services.transfers.balance(account.id)
        logger.info(
            f"{account.id:>4}  {account.name:<24} {account.category:<10} "
            f"{format_money(balance):>16}{status}"
        )

    logger.info(f"\nTotal accounts: {len(accounts)}")


def cmd_create(args, services):
    """Create a new account."""
    try:
        account = services.accounts.create(args.name, args.category)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except sqlite3.IntegrityError:
        logger.error(f"An account named '{args.name}' already exists.")
        sys.exit(1)

    logger.info(f"✓ Account created successfully with ID: {account.id}")
    logger.info(f"  Name: {account.name}")
    logger.info(f"  Category: {account.category}")


def cmd_archive(args, services):
    """Archive an account (hide it without deleting its transfers)."""
    account = require_account(services, args.name)
    services.accounts.archive(account.id)
    logger.info(f"✓ Archived account '{account.name}'")


def cmd_restore(args, services):
    """Restore an archived account."""
    account = require_account(services, args.name)
    services.accounts.restore(account.id)
    logger.info(f"✓ Restored account '{account.name}'")


def cmd_delete(args, services):
    """Delete an account that has no transfers."""
    account = require_account(services, args.name)
    try:
        services.accounts.delete(account.id)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"✓ Deleted account '{account.name}'")


def cmd_revalue(args, services):
    """Record a market valuation for an account."""
    account = require_account(services, args.name)
    market = require_account(services, args.market or services.config.market_account)

    adjustment = services.transfers.record_valuation(
        account.id, args.value, args.date or date.today(), market.id
    )
    if adjustment is None:
        logger.info(f"Value of '{account.name}' unchanged, nothing recorded.")
        return

    logger.info(f"✓ {adjustment.description}: {format_money(adjustment.amount)}")
    logger.info(f"  New balance: {format_money(services.transfers.balance(account.id))}")


def setup_parser(subparsers):
    """Setup accounts subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "accounts",
        help="Manage accounts",
        description="Create, list, archive and value accounts",
    )

    accounts_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available account commands",
        dest="subcommand",
        required=True,
    )

    list_parser = accounts_subparsers.add_parser("list", help="List accounts")
    list_parser.add_argument(
        "--all", action="store_true", help="Include archived accounts"
    )
    list_parser.set_defaults(func=cmd_list)

    create_parser = accounts_subparsers.add_parser("create", help="Create an account")
    create_parser.add_argument("name", help="Unique account name, e.g. checking")
    create_parser.add_argument("category", choices=ACCOUNT_CATEGORIES)
    create_parser.set_defaults(func=cmd_create)

    for name, func, help_text in (
        ("archive", cmd_archive, "Archive an account"),
        ("restore", cmd_restore, "Restore an archived account"),
        ("delete", cmd_delete, "Delete an account without transfers"),
    ):
        sub = accounts_subparsers.add_parser(name, help=help_text)
        sub.add_argument("name", help="Account name")
        sub.set_defaults(func=func)

    revalue_parser = accounts_subparsers.add_parser(
        "revalue", help="Record the current market value of an account"
    )
    revalue_parser.add_argument("name", help="Account name")
    revalue_parser.add_argument("value", type=parse_amount, help="Market value")
    revalue_parser.add_argument("--date", type=parse_date, help="Valuation date (default: today)")
    revalue_parser.add_argument(
        "--market", help="Counterparty account for adjustments (default from config)"
    )
    revalue_parser.set_defaults(func=cmd_revalue)
