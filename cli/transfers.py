#!/usr/bin/env python3

import sys
from cli.common import format_money, parse_amount, parse_date, require_account
from models.transfer import TaxInfo, Transfer
from logger import get_logger

logger = get_logger()


def cmd_add(args, services):
    """Record a transfer between two accounts."""
    source = require_account(services, args.source)
    destination = require_account(services, args.destination)

    if args.amount < 0:
        logger.error("Amount must not be negative; swap --from and --to instead.")
        sys.exit(1)

    transfer = services.transfers.create(
        Transfer(
            amount=args.amount,
            date=args.date,
            description=args.description,
            source_id=source.id,
            destination_id=destination.id,
            tax_info=TaxInfo(
                is_taxable=args.taxable,
                federal_tax_rate=args.federal_rate,
                state_tax_rate=args.state_rate,
            ),
        )
    )

    logger.info(f"✓ Transfer recorded with ID: {transfer.id}")
    logger.info(
        f"  {transfer.date}  {source.name} -> {destination.name}  "
        f"{format_money(transfer.amount)}  {transfer.description}"
    )


def cmd_list(args, services):
    """List the most recent transfers, optionally for one account."""
    account = require_account(services, args.account) if args.account else None
    account_id = account.id if account else None

    transfers = services.transfers.recent(limit=args.limit, account_id=account_id)
    if not transfers:
        logger.info("No transfers found.")
        return

    names = {a.id: a.name for a in services.accounts.find_all(include_archived=True)}

    logger.info("\nRecent transfers:")
    logger.info("=" * 80)
    for transfer in transfers:
        if account_id is not None:
            amount = format_money(transfer.value_for(account_id))
        else:
            amount = format_money(transfer.amount)
        logger.info(
            f"{transfer.id:>5}  {transfer.date}  "
            f"{names.get(transfer.source_id, transfer.source_id)} -> "
            f"{names.get(transfer.destination_id, transfer.destination_id)}  "
            f"{amount:>14}  {transfer.description}"
        )


def cmd_delete(args, services):
    """Delete a transfer by ID."""
    if not services.transfers.delete(args.id):
        logger.error(f"Transfer {args.id} not found.")
        sys.exit(1)
    logger.info(f"✓ Deleted transfer {args.id}")


def setup_parser(subparsers):
    """Setup transfers subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transfers",
        help="Record and list transfers",
        description="Record money moving between accounts",
    )

    transfers_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transfer commands",
        dest="subcommand",
        required=True,
    )

    add_parser = transfers_subparsers.add_parser("add", help="Record a transfer")
    add_parser.add_argument("--from", dest="source", required=True, help="Source account")
    add_parser.add_argument("--to", dest="destination", required=True, help="Destination account")
    add_parser.add_argument("--amount", type=parse_amount, required=True)
    add_parser.add_argument("--date", type=parse_date, required=True, help="YYYY-MM-DD")
    add_parser.add_argument("--description", default="")
    add_parser.add_argument("--taxable", action="store_true")
    add_parser.add_argument("--federal-rate", type=parse_amount, default=0)
    add_parser.add_argument("--state-rate", type=parse_amount, default=0)
    add_parser.set_defaults(func=cmd_add)

    list_parser = transfers_subparsers.add_parser("list", help="List recent transfers")
    list_parser.add_argument("--limit", type=int, default=10)
    list_parser.add_argument("--account", help="Only transfers touching this account")
    list_parser.set_defaults(func=cmd_list)

    delete_parser = transfers_subparsers.add_parser("delete", help="Delete a transfer")
    delete_parser.add_argument("id", type=int)
    delete_parser.set_defaults(func=cmd_delete)
