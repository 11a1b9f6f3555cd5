"""Fulfillment database management CLI.

Creates and drops the relational schema of the fulfillment domain using the
providers configured in ``domain.toml``.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    """Create the fulfillment schema; returns the providers touched."""
    from fulfillment.domain import fulfillment
    from fulfillment.utils.db import setup_db

    print("Initializing fulfillment domain...")
    fulfillment.init()
    print("Creating fulfillment database schema...")
    touched = setup_db(fulfillment)
    if touched:
        print(f"  Schema ready on: {', '.join(touched)}")
    else:
        print("  No relational provider configured; nothing to create.")
    print("Done.")
    return touched


def drop_databases():
    """Drop the fulfillment schema; returns the providers touched."""
    from fulfillment.domain import fulfillment
    from fulfillment.utils.db import drop_db

    print("Initializing fulfillment domain...")
    fulfillment.init()
    print("Dropping fulfillment database schema...")
    touched = drop_db(fulfillment)
    if touched:
        print(f"  Schema dropped on: {', '.join(touched)}")
    else:
        print("  No relational provider configured; nothing to drop.")
    print("Done.")
    return touched


def main(argv=None):
    parser = argparse.ArgumentParser(description="Fulfillment database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
