#!/usr/bin/env python3
"""Migration script to rewrite legacy payment text in personalized messages.

Older personalized messages spelled out the payment link and the payment
description separately:

    To pay the outstanding balance, use the following link:
    🔗 {payment-link}
    📝 Additional instructions: {payment-description}

This migration replaces that fragment with the unified placeholder:

    To pay the outstanding balance:
    {payment-instructions}

Messages are also migrated lazily when read, so running this script is
optional. It is safe to run more than once.

Usage:
    python migrations/migrate_legacy_message_templates.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import invoicekit modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from invoicekit.database.factories import create_sqlite_database
from invoicekit.domain.messages import MessageTemplateService


def migrate_database(database_path: str | None = None) -> int:
    """Migrate all stored messages.

    Args:
        database_path: Path to database file. If None, uses default location.

    Returns:
        Number of messages rewritten

    Raises:
        MigrationFailure: If a migrated message cannot be saved
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        db.initialize_schema()
        print("Starting migration: unifying payment instructions in messages...")
        count = MessageTemplateService(db).migrate_all()
        if count == 0:
            print("Migration already applied: no legacy messages found")
        else:
            print(f"  Rewrote {count} message(s)")
        print("Migration completed successfully!")
        return count
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Rewrite legacy payment link text in personalized messages"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides INVOICEKIT_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
