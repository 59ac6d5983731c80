"""Checkout database management CLI.

Creates and drops the SQL schema for the checkout domain. Has no effect
while the domain is configured with the memory provider.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from checkout.domain import checkout
    from checkout.utils.db import setup_db

    print("Initializing checkout domain...")
    checkout.init()
    print("Creating checkout database schema...")
    setup_db(checkout)
    print("Done.")


def drop_database():
    from checkout.domain import checkout
    from checkout.utils.db import drop_db

    print("Initializing checkout domain...")
    checkout.init()
    print("Dropping checkout database schema...")
    drop_db(checkout)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Shoestore checkout database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
