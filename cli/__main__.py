#!/usr/bin/env python3
"""
Runway CLI - accounts, transfers and cash-flow projections.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    accounts     Manage accounts
    transfers    Record and list transfers
    portfolios   Group accounts for projection
    rules        Inspect recurring rules
    project      Project future balances
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli accounts create checking asset
    python -m cli transfers add --from employer --to checking --amount 5000 --date 2024-01-01
    python -m cli portfolios add-account household checking
    python -m cli project --portfolio household --months 12
"""

import sys
import argparse
from cli import accounts, transfers, portfolios, projection, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Runway - Personal cash-flow projection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    accounts.setup_parser(subparsers)
    transfers.setup_parser(subparsers)
    portfolios.setup_parser(subparsers)
    projection.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config()
        setup_logging(config)

        # migrate works on the raw database; everything else goes through services
        if args.command == "migrate":
            args.func(args, DatabaseManager(config))
        else:
            args.func(args, Services(config))
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
