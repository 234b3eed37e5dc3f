"""``folio migrate``: apply pending migrations and report."""

import sys

import anyio

from folio.config import SiteConfig
from folio.data import Database, MigrationError, migrate


async def _migrate(config: SiteConfig) -> str:
    async with Database(config.database_url, echo=config.debug) as db:
        result = await migrate(db, config.migrations_dir)
    return result.summary


def run_migrate(config: SiteConfig) -> None:
    try:
        summary = anyio.run(_migrate, config)
    except MigrationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    print(summary)
