#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_status(args, db_manager):
    """Show which migrations have been applied."""
    if not db_manager.get_db_path().exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    status = db_manager.migration_status()
    if not status:
        logger.info("No migrations found.")
        return

    logger.info("Migration Status:")
    logger.info("================")
    for name, applied in status:
        logger.info(f"{name}: {'APPLIED' if applied else 'PENDING'}")

    pending = sum(1 for _, applied in status if not applied)
    logger.info(f"\nApplied: {len(status) - pending}, pending: {pending}")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    applied = db_manager.migrate()
    if not applied:
        logger.info("No pending migrations.")
    else:
        logger.info(f"Successfully applied {len(applied)} migration(s).")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Create or upgrade the ledger database schema",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
