#!/usr/bin/env python3

import sqlite3
import sys
from decimal import Decimal
from cli.common import format_money, require_account, require_portfolio
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List portfolios and their combined balances."""
    portfolios = services.portfolios.find_all()
    if not portfolios:
        logger.info("No portfolios found.")
        return

    logger.info("\nPortfolios:")
    logger.info("=" * 80)
    for portfolio in portfolios:
        accounts = services.portfolios.account_set(portfolio.id)
        balance = services.projections.starting_balance(accounts)
        logger.info(
            f"{portfolio.id:>4}  {portfolio.name:<24} {len(accounts):>3} account(s) "
            f"{format_money(balance):>16}"
        )


def cmd_show(args, services):
    """Show the accounts in a portfolio."""
    portfolio = require_portfolio(services, args.name)
    accounts = services.portfolios.accounts(portfolio.id)

    logger.info(f"\nPortfolio: {portfolio.name}")
    logger.info("=" * 80)
    if not accounts:
        logger.info("No accounts in this portfolio.")
        return

    total = Decimal("0")
    for account in accounts:
        balance = services.transfers.balance(account.id)
        total += balance
        logger.info(f"  {account.name:<24} {account.category:<10} {format_money(balance):>16}")
    logger.info("-" * 80)
    logger.info(f"  {'Total':<35} {format_money(total):>16}")


def cmd_create(args, services):
    try:
        portfolio = services.portfolios.create(args.name)
    except sqlite3.IntegrityError:
        logger.error(f"A portfolio named '{args.name}' already exists.")
        sys.exit(1)
    logger.info(f"✓ Portfolio created successfully with ID: {portfolio.id}")


def cmd_delete(args, services):
    portfolio = require_portfolio(services, args.name)
    services.portfolios.delete(portfolio.id)
    logger.info(f"✓ Deleted portfolio '{portfolio.name}'")


def cmd_add_account(args, services):
    portfolio = require_portfolio(services, args.name)
    account = require_account(services, args.account)
    if services.portfolios.add_account(portfolio.id, account.id):
        logger.info(f"✓ Added '{account.name}' to '{portfolio.name}'")
    else:
        logger.info(f"'{account.name}' is already in '{portfolio.name}'")


def cmd_remove_account(args, services):
    portfolio = require_portfolio(services, args.name)
    account = require_account(services, args.account)
    if services.portfolios.remove_account(portfolio.id, account.id):
        logger.info(f"✓ Removed '{account.name}' from '{portfolio.name}'")
    else:
        logger.info(f"'{account.name}' is not in '{portfolio.name}'")


def setup_parser(subparsers):
    """Setup portfolios subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "portfolios",
        help="Manage portfolios",
        description="Group accounts into portfolios for projection",
    )

    portfolios_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available portfolio commands",
        dest="subcommand",
        required=True,
    )

    list_parser = portfolios_subparsers.add_parser("list", help="List portfolios")
    list_parser.set_defaults(func=cmd_list)

    for name, func, help_text in (
        ("show", cmd_show, "Show a portfolio's accounts"),
        ("create", cmd_create, "Create a portfolio"),
        ("delete", cmd_delete, "Delete a portfolio"),
    ):
        sub = portfolios_subparsers.add_parser(name, help=help_text)
        sub.add_argument("name", help="Portfolio name")
        sub.set_defaults(func=func)

    for name, func, help_text in (
        ("add-account", cmd_add_account, "Add an account to a portfolio"),
        ("remove-account", cmd_remove_account, "Remove an account from a portfolio"),
    ):
        sub = portfolios_subparsers.add_parser(name, help=help_text)
        sub.add_argument("name", help="Portfolio name")
        sub.add_argument("account", help="Account name")
        sub.set_defaults(func=func)
