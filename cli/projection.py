#!/usr/bin/env python3

import json
import sys
from datetime import date, timedelta
from pathlib import Path
from cli.common import format_money, parse_date, require_account, require_portfolio
from forecast.errors import InvalidRule, ProjectionUnavailable
from models.portfolio import AccountSet
from logger import get_logger

logger = get_logger()


def _load_rules(args, services):
    try:
        return services.rules.load(Path(args.rules) if args.rules else None)
    except (ValueError, InvalidRule) as e:
        logger.error(str(e))
        sys.exit(1)


def cmd_rules_list(args, services):
    """List recurring rules and when each fires next."""
    rules = _load_rules(args, services)
    if not rules:
        logger.info("No recurring rules defined.")
        return

    names = {a.id: a.name for a in services.accounts.find_all(include_archived=True)}
    today = args.as_of or date.today()

    logger.info("\nRecurring rules:")
    logger.info("=" * 80)
    for rule in rules:
        next_date = rule.next_occurrence(after=today - timedelta(days=1))
        schedule = ", ".join(
            f"{key}={value}" for key, value in rule.calendar_rule.to_dict().items()
            if value is not None
        )
        logger.info(f"{rule.description}")
        logger.info(
            f"  {format_money(rule.base_amount)}  "
            f"{names.get(rule.source_id)} -> {names.get(rule.destination_id)}"
        )
        logger.info(f"  schedule: {schedule}")
        logger.info(
            f"  active: {rule.start_date} to {rule.end_date or 'open'}; "
            f"next: {next_date or 'none'}"
        )


def cmd_project(args, services):
    """Project the balance of a portfolio or a set of accounts."""
    if args.portfolio:
        portfolio = require_portfolio(services, args.portfolio)
        accounts = services.portfolios.account_set(portfolio.id)
        label = f"portfolio '{portfolio.name}'"
    elif args.account:
        accounts = AccountSet.from_iterable(
            require_account(services, name).id for name in args.account
        )
        label = ", ".join(args.account)
    else:
        logger.error("Specify --portfolio or at least one --account.")
        sys.exit(1)

    rules = _load_rules(args, services)
    months = args.months if args.months is not None else services.config.horizon_months

    try:
        projection = services.projections.project(
            accounts, rules, horizon_months=months, as_of=args.as_of
        )
    except ProjectionUnavailable as e:
        logger.error(str(e))
        sys.exit(1)

    if args.json:
        print(json.dumps(projection.to_dict(), indent=2))
        return

    logger.info(
        f"\nProjection for {label}: {projection.start_date} to {projection.end_date}"
    )
    logger.info("=" * 80)
    logger.info(f"Starting balance: {format_money(projection.starting_balance)}")
    logger.info("-" * 80)
    for entry in projection.entries:
        logger.info(
            f"{entry.date}  {entry.description:<30} "
            f"{format_money(entry.amount):>14}  {format_money(entry.balance):>16}"
        )
    logger.info("-" * 80)
    logger.info(f"Ending balance: {format_money(projection.ending_balance)}")


def _add_common_arguments(parser):
    parser.add_argument("--rules", help="Rules file (default from config)")
    parser.add_argument("--as-of", type=parse_date, help="Start date (default: today)")


def setup_parser(subparsers):
    """Setup project and rules subcommand parsers.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    project_parser = subparsers.add_parser(
        "project",
        help="Project future balances",
        description="Project balances forward using the recurring rules",
    )
    project_parser.add_argument("--portfolio", help="Portfolio to project")
    project_parser.add_argument(
        "--account", action="append", help="Account to project (repeatable)"
    )
    project_parser.add_argument("--months", type=int, help="Horizon in months")
    project_parser.add_argument("--json", action="store_true", help="Print JSON")
    _add_common_arguments(project_parser)
    project_parser.set_defaults(func=cmd_project)

    rules_parser = subparsers.add_parser(
        "rules",
        help="Inspect recurring rules",
        description="Inspect the recurring rules file",
    )
    rules_subparsers = rules_parser.add_subparsers(
        title="subcommands",
        description="Available rule commands",
        dest="subcommand",
        required=True,
    )
    list_parser = rules_subparsers.add_parser("list", help="List recurring rules")
    _add_common_arguments(list_parser)
    list_parser.set_defaults(func=cmd_rules_list)
