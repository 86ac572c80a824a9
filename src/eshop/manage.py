"""Storefront database management CLI.

Provides commands to create and drop the storefront schema and to load the
demo catalogue. Reuses the setup_db/drop_db utilities in ``eshop.utils.db``.

Usage:
    python -m eshop.manage setup-db   # Create all tables
    python -m eshop.manage drop-db    # Drop all tables
    python -m eshop.manage seed       # Insert demo categories and products
"""

import argparse
import os
import sys


def setup_database(domain):
    """Create the storefront database schema."""
    from eshop.utils.db import setup_db

    print(f"Creating {domain.name} database schema...")
    setup_db(domain)
    print(f"  {domain.name} schema ready.")


def drop_database(domain):
    """Drop the storefront database schema."""
    from eshop.utils.db import drop_db

    print(f"Dropping {domain.name} database schema...")
    drop_db(domain)
    print(f"  {domain.name} schema dropped.")


def seed_database(domain):
    """Create the schema if needed and load the demo catalogue."""
    from eshop.catalogue.seed import seed_catalogue
    from eshop.utils.db import setup_db

    setup_db(domain)
    with domain.domain_context():
        created = seed_catalogue()
    print(f"  {created} products created.")


COMMANDS = {
    "setup-db": setup_database,
    "drop-db": drop_database,
    "seed": seed_database,
}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    parser.add_argument("--env", help="Configuration overlay to load (default: PROTEAN_ENV)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load the demo catalogue into an empty database")

    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    # The domain reads its configuration when first imported
    if args.env:
        os.environ["PROTEAN_ENV"] = args.env

    from eshop.config import load_settings
    from eshop.storefront import init_domain
    from eshop.utils.logging import configure_logging

    settings = load_settings()
    configure_logging(settings.log_level, log_dir=None)

    print("Initializing eshop domain...")
    command(init_domain())
    print("Done.")


if __name__ == "__main__":
    main()
