"""Forward-only SQL migration runner.

Migrations are numbered ``.sql`` files in a directory::

    migrations/
        001_create_entries.sql
        002_create_canvases.sql

Applied versions are recorded in a ``_folio_migrations`` table. A
failing migration stops the run; later files are not attempted.

Usage::

    from folio.data import Database, migrate

    async with Database("sqlite:///folio.db") as db:
        result = await migrate(db, "migrations/")
        print(result.summary)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from folio.data.database import Database
from folio.data.errors import MigrationError

logger = logging.getLogger("folio.data")

_TRACKING_TABLE = "_folio_migrations"

_CREATE_TRACKING_SQL = f"""
CREATE TABLE IF NOT EXISTS {_TRACKING_TABLE} (
    version    INTEGER PRIMARY KEY,
    name       TEXT    NOT NULL,
    applied_at TEXT    NOT NULL
)
"""


@dataclass(frozen=True, slots=True)
class Migration:
    """A single migration file."""

    version: int
    name: str
    sql: str


@dataclass(frozen=True, slots=True)
class MigrationResult:
    applied: list[str]
    already_applied: int
    total_available: int

    @property
    def summary(self) -> str:
        if not self.applied:
            return f"Already up to date ({self.already_applied} migrations applied)"
        return f"Applied {len(self.applied)} migration(s): {', '.join(self.applied)}"


@dataclass(frozen=True, slots=True)
class _Version:
    version: int


def discover_migrations(directory: str | Path) -> list[Migration]:
    """Read ``NNN_description.sql`` files from *directory*, sorted by version."""
    path = Path(directory)
    if not path.is_dir():
        msg = f"Migration directory does not exist: {path}"
        raise MigrationError(msg)

    migrations: list[Migration] = []
    for sql_file in sorted(path.glob("*.sql")):
        number, sep, _rest = sql_file.stem.partition("_")
        if not sep:
            msg = f"Invalid migration filename: {sql_file.name} (expected NNN_description.sql)"
            raise MigrationError(msg)
        try:
            version = int(number)
        except ValueError:
            msg = f"Invalid migration version in {sql_file.name}: {number!r} is not an integer"
            raise MigrationError(msg) from None

        sql = sql_file.read_text(encoding="utf-8").strip()
        if not sql:
            msg = f"Empty migration file: {sql_file.name}"
            raise MigrationError(msg)
        migrations.append(Migration(version=version, name=sql_file.stem, sql=sql))

    versions = [m.version for m in migrations]
    if len(versions) != len(set(versions)):
        msg = "Duplicate migration version numbers found"
        raise MigrationError(msg)

    migrations.sort(key=lambda m: m.version)
    return migrations


async def applied_versions(db: Database) -> set[int]:
    """Versions already recorded in the tracking table."""
    await db.execute(_CREATE_TRACKING_SQL)
    rows = await db.fetch(_Version, f"SELECT version FROM {_TRACKING_TABLE}")
    return {row.version for row in rows}


async def _apply(db: Database, migration: Migration) -> None:
    # executescript commits on its own, so the tracking row follows it.
    await db.execute_script(migration.sql)
    await db.execute(
        f"INSERT INTO {_TRACKING_TABLE} (version, name, applied_at) VALUES (?, ?, ?)",
        migration.version,
        migration.name,
        datetime.now(UTC).isoformat(),
    )


async def migrate(db: Database, directory: str | Path) -> MigrationResult:
    """Apply pending migrations from *directory* in version order.

    Raises:
        MigrationError: If the directory is invalid or a migration fails.
    """
    migrations = discover_migrations(directory)
    done = await applied_versions(db)

    applied: list[str] = []
    for migration in migrations:
        if migration.version in done:
            continue
        try:
            await _apply(db, migration)
        except Exception as exc:
            msg = f"Migration {migration.name} failed: {exc}"
            raise MigrationError(msg) from exc
        logger.info("Applied migration %s", migration.name)
        applied.append(migration.name)

    return MigrationResult(
        applied=applied,
        already_applied=len(done),
        total_available=len(migrations),
    )
