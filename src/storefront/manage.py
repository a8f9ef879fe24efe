"""Storefront database management CLI.

Creates and drops the relational schema for the configured providers.
The memory provider needs neither.

Usage:
    PROTEAN_ENV=production python -m storefront.manage setup-db
    PROTEAN_ENV=production python -m storefront.manage drop-db
"""

import argparse
import sys


def setup_databases():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    touched = setup_db(storefront)
    print(f"  schema ready on: {', '.join(touched) or 'no relational providers'}")


def drop_databases():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    touched = drop_db(storefront)
    print(f"  schema dropped on: {', '.join(touched) or 'no relational providers'}")


def main(argv=None):
    from storefront.utils.logging import configure_logging

    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    return 0


if __name__ == "__main__":
    sys.exit(main())
