"""One sqlite3 connection driven from async code.

Each method runs a whole statement (execute plus fetch) in a single
``anyio.to_thread`` call and returns plain Python values, so no cursor
ever crosses back to the event loop. The connection is opened with
``check_same_thread=False`` because calls may land on different worker
threads; ``Database`` holds the lock that keeps them from overlapping.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any

import anyio.to_thread

type Row = dict[str, Any]


def _as_dicts(cursor: sqlite3.Cursor, rows: Sequence[Sequence[Any]]) -> list[Row]:
    columns = [desc[0] for desc in cursor.description or ()]
    return [dict(zip(columns, row, strict=True)) for row in rows]


class SQLiteConnection:
    """A single autocommit connection with explicit transactions.

    Usage::

        conn = await SQLiteConnection.open("folio.db")
        rows = await conn.rows("SELECT * FROM entries WHERE id = ?", (1,))
        rowcount, last_id = await conn.run("DELETE FROM entries WHERE id = ?", (1,))
        await conn.close()
    """

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @classmethod
    async def open(cls, path: str) -> SQLiteConnection:
        """Connect in autocommit mode with WAL journaling and foreign keys on."""

        def _open() -> sqlite3.Connection:
            conn = sqlite3.connect(path, autocommit=True, check_same_thread=False)
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")
            return conn

        return cls(await anyio.to_thread.run_sync(_open))

    async def rows(
        self, sql: str, params: Sequence[Any] = (), *, limit: int | None = None
    ) -> list[Row]:
        """Run a query and return up to *limit* rows (all when ``None``) as dicts."""

        def _rows() -> list[Row]:
            cursor = self._conn.execute(sql, params)
            fetched = cursor.fetchall() if limit is None else cursor.fetchmany(limit)
            return _as_dicts(cursor, fetched)

        return await anyio.to_thread.run_sync(_rows)

    async def run(self, sql: str, params: Sequence[Any] = ()) -> tuple[int, int | None]:
        """Run a statement and return ``(rowcount, lastrowid)``."""

        def _run() -> tuple[int, int | None]:
            cursor = self._conn.execute(sql, params)
            return cursor.rowcount, cursor.lastrowid

        return await anyio.to_thread.run_sync(_run)

    async def script(self, sql: str) -> None:
        """Run several statements at once.

        ``executescript`` commits any pending transaction first and does
        not honor ``autocommit``.
        """
        await anyio.to_thread.run_sync(self._conn.executescript, sql)

    # -- Transactions --

    async def begin(self) -> None:
        """Leave autocommit mode; sqlite3 opens the transaction implicitly."""
        await anyio.to_thread.run_sync(setattr, self._conn, "autocommit", False)

    async def commit(self) -> None:
        await anyio.to_thread.run_sync(self._finish, self._conn.commit)

    async def rollback(self) -> None:
        await anyio.to_thread.run_sync(self._finish, self._conn.rollback)

    def _finish(self, end: Any) -> None:
        try:
            end()
        finally:
            self._conn.autocommit = True

    async def close(self) -> None:
        await anyio.to_thread.run_sync(self._conn.close)
