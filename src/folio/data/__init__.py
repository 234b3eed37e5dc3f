"""Typed async SQLite access for folio.

SQL in, frozen dataclasses out. Not an ORM.

Basic usage::

    from folio.data import Database

    db = Database("sqlite:///folio.db")

    @dataclass(frozen=True, slots=True)
    class Entry:
        id: int
        type: str
        content: str

    entries = await db.fetch(Entry, "SELECT * FROM entries WHERE published = ?", 1)
"""

from folio.data.database import Database
from folio.data.errors import DataError, MigrationError, QueryError
from folio.data.migrate import MigrationResult, migrate

__all__ = [
    "DataError",
    "Database",
    "MigrationError",
    "MigrationResult",
    "QueryError",
    "migrate",
]
