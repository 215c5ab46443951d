#!/usr/bin/env python3
"""Check that the live copy-trading tables match their declared schemas."""

import argparse
import asyncio
import logging
import sys

from rich.console import Console

from copytrading.config import config
from copytrading.db import Database
from copytrading.errors import SchemaMismatchError
from copytrading.position import PositionRepository
from copytrading.provider import ProviderRepository
from copytrading.subscription import SubscriptionRepository

console = Console()


async def check(service_name: str) -> bool:
    """Verify every table on one shared handle. Returns True when all match."""
    database = Database(config.postgres_settings(), service_name)
    repositories = [
        ProviderRepository(database),
        SubscriptionRepository(database),
        PositionRepository(database),
    ]
    ok = True
    try:
        await database.open()
        for repo in repositories:
            try:
                await repo.verify_schema()
            except SchemaMismatchError as e:
                ok = False
                console.print(f"[red]✗ {repo.table_name}[/]")
                for problem in e.problems:
                    console.print(f"    {problem}")
            else:
                console.print(f"[green]✓ {repo.table_name}[/]")
    finally:
        for repo in repositories:
            await repo.close()
    return ok


def main():
    parser = argparse.ArgumentParser(description="Verify copy-trading table schemas")
    parser.add_argument(
        "--service-name",
        default=config.service_name,
        help="Service identifier reported to Postgres as application_name",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log verification details")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not asyncio.run(check(args.service_name)):
        console.print("[red]Schema mismatch found.[/]")
        sys.exit(1)
    console.print("[green]All tables match.[/]")


if __name__ == "__main__":
    main()
