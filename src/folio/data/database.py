"""Typed async SQLite access.

SQL in, frozen dataclasses out. Not an ORM.

Connection URL format::

    sqlite:///path/to/folio.db    # SQLite file
    sqlite:///:memory:            # In-memory SQLite

All public methods are async; blocking sqlite3 calls run on worker
threads, and one ``anyio.Lock`` serializes use of the single
connection. Statements inside ``transaction()`` reuse the transaction's
connection through a ContextVar.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from collections.abc import AsyncIterator, Iterator, Sequence
from contextlib import asynccontextmanager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

import anyio

from folio.data._mapping import map_row, map_rows
from folio.data._sqlite import SQLiteConnection
from folio.data.errors import DataError, QueryError

logger = logging.getLogger("folio.data")

# Set inside transaction(): query methods reuse the transaction's
# connection instead of taking the lock again.
_current_conn: ContextVar[SQLiteConnection | None] = ContextVar("folio_db_conn")


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration."""

    url: str
    echo: bool = False


class Database:
    """Typed async database access.

    Usage::

        db = Database("sqlite:///folio.db")

        @dataclass(frozen=True, slots=True)
        class Entry:
            id: int
            type: str

        entries = await db.fetch(Entry, "SELECT * FROM entries WHERE published = ?", 1)
        entry = await db.fetch_one(Entry, "SELECT * FROM entries WHERE id = ?", 42)
        new_id = await db.insert("INSERT INTO entries (type, content) VALUES (?, ?)", "text", "{}")
        count = await db.fetch_val("SELECT COUNT(*) FROM entries")

        async with db.transaction():
            await db.execute("DELETE FROM entries WHERE id = ?", 1)
            await db.execute("DELETE FROM canvases WHERE id = ?", 1)
    """

    __slots__ = ("_async_lock", "_config", "_conn", "_lock", "_path")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self._config = DatabaseConfig(url=url, echo=echo)
        self._path = _parse_sqlite_path(url)
        self._lock = threading.Lock()
        self._async_lock: anyio.Lock | None = None  # Created lazily inside the event loop
        self._conn: SQLiteConnection | None = None

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def connected(self) -> bool:
        return self._conn is not None

    # -- Connection management --

    def _get_lock(self) -> anyio.Lock:
        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        return self._async_lock

    def _require_conn(self) -> SQLiteConnection:
        conn = self._conn
        if conn is None:
            msg = f"Database {self._config.url} is not connected"
            raise DataError(msg)
        return conn

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[SQLiteConnection]:
        """Yield the connection, serialized unless a transaction already owns it."""
        conn = _current_conn.get(None)
        if conn is not None:
            yield conn
            return

        await self.connect()
        async with self._get_lock():
            yield self._require_conn()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Execute several statements atomically.

        Commits on clean exit, rolls back on exception. Nested calls join
        the outer transaction.
        """
        if _current_conn.get(None) is not None:
            yield
            return

        await self.connect()
        async with self._get_lock():
            conn = self._require_conn()
            token = _current_conn.set(conn)
            try:
                await conn.begin()
                yield
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise
            finally:
                _current_conn.reset(token)

    # -- Echo / query logging --

    @contextmanager
    def _statement(self, sql: str, params: Sequence[Any]) -> Iterator[None]:
        """Translate sqlite3 errors and, with ``echo``, log the statement and its time."""
        t0 = time.perf_counter()
        try:
            yield
        except sqlite3.Error as exc:
            raise QueryError(str(exc)) from exc
        finally:
            if self._config.echo:
                param_str = f"  params={tuple(params)!r}" if params else ""
                elapsed_ms = (time.perf_counter() - t0) * 1000
                logger.info("%6.1fms  %s%s", elapsed_ms, " ".join(sql.split()), param_str)

    # -- Public query API --

    async def fetch[T](self, cls: type[T], sql: str, /, *params: Any) -> list[T]:
        """Execute a query and return all rows as typed dataclasses."""
        return map_rows(cls, await self.fetch_dicts(sql, *params))

    async def fetch_one[T](self, cls: type[T], sql: str, /, *params: Any) -> T | None:
        """Execute a query and return the first row, or ``None``."""
        row = await self.fetch_dict(sql, *params)
        return None if row is None else map_row(cls, row)

    async def fetch_dicts(self, sql: str, /, *params: Any) -> list[dict[str, Any]]:
        """Execute a query and return plain ``{column: value}`` rows."""
        async with self._connection() as conn:
            with self._statement(sql, params):
                return await conn.rows(sql, params)

    async def fetch_dict(self, sql: str, /, *params: Any) -> dict[str, Any] | None:
        """Execute a query and return the first plain row, or ``None``."""
        async with self._connection() as conn:
            with self._statement(sql, params):
                rows = await conn.rows(sql, params, limit=1)
        return rows[0] if rows else None

    async def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """Return the first column of the first row (COUNT, MAX, ...)."""
        row = await self.fetch_dict(sql, *params)
        if row is None:
            return None
        return next(iter(row.values()))

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Execute an UPDATE/DELETE (or any statement) and return rows affected."""
        async with self._connection() as conn:
            with self._statement(sql, params):
                rowcount, _ = await conn.run(sql, params)
        return rowcount

    async def insert(self, sql: str, /, *params: Any) -> int:
        """Execute an INSERT and return the new row id."""
        async with self._connection() as conn:
            with self._statement(sql, params):
                _, last_id = await conn.run(sql, params)
        if last_id is None:
            msg = f"Statement did not insert a row: {sql!r}"
            raise QueryError(msg)
        return last_id

    async def execute_script(self, sql: str, /) -> None:
        """Execute several statements at once (migration files)."""
        async with self._connection() as conn:
            with self._statement(sql, ()):
                await conn.script(sql)

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection. Called automatically on first query."""
        if self._conn is not None:
            return
        conn = await SQLiteConnection.open(self._path)
        with self._lock:
            if self._conn is None:
                self._conn, conn = conn, None
        if conn is not None:
            await conn.close()
            return
        logger.debug("Connected to %s", self._config.url)

    async def disconnect(self) -> None:
        """Close the connection."""
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()


def _parse_sqlite_path(url: str) -> str:
    """Extract the file path from a ``sqlite://`` URL.

    ``sqlite:///path/to/db`` -> ``path/to/db``, ``sqlite:///:memory:`` -> ``:memory:``.
    """
    for prefix in ("sqlite:///", "sqlite://"):
        if url.startswith(prefix):
            return url[len(prefix) :]
    msg = f"Unsupported database URL: {url!r}. Supported: sqlite:///path"
    raise DataError(msg)
