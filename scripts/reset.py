#!/usr/bin/env python3
"""Reset script for Runway.

Deletes the data directory (database and logs) and recreates an empty,
fully migrated database. The rules file is kept when it lives outside the
data directory.
"""

import shutil
import sys

from config import load_config
from db.manager import DatabaseManager


def reset():
    """Reset the application state."""
    print("Runway Reset Script")
    print("=" * 50)

    config = load_config()

    if not config.enable_reset:
        print("\nReset is disabled in configuration (enable_reset=false).")
        print("To enable reset, set enable_reset=true in ~/.config/runway.toml")
        sys.exit(1)

    print(f"\nData directory: {config.base_dir}")
    print(f"Database: {config.db_path}")
    print(f"Logs: {config.log_dir}")
    if config.rules_path.is_relative_to(config.base_dir):
        print(f"Rules file: {config.rules_path} (will be deleted)")

    response = input("\nThis will delete ALL data. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Reset cancelled.")
        sys.exit(0)

    if config.base_dir.exists():
        print(f"\nDeleting {config.base_dir}...")
        shutil.rmtree(config.base_dir)
        print("✓ Data directory deleted")
    else:
        print(f"\n✓ Data directory does not exist: {config.base_dir}")

    print("\nRunning migrations...")
    applied = DatabaseManager(config).migrate()
    print(f"✓ Applied {len(applied)} migration(s)")

    print("\n" + "=" * 50)
    print("Reset complete! Database has been recreated.")
    print(f"Database location: {config.db_path}")


if __name__ == "__main__":
    reset()
