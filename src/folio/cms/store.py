"""Entry and canvas persistence on top of ``folio.data.Database``."""

import json
import logging
from typing import Any

from folio.cms.models import Canvas, Entry, EntryType
from folio.data import Database, DataError
from folio.errors import BadRequest

logger = logging.getLogger("folio.cms")

_UNSET: Any = object()

_SUMMARY_COLUMNS = "id, type, content, created_at, updated_at, published, metadata, position_index"


def _entry_type(value: Any) -> EntryType:
    try:
        return EntryType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in EntryType)
        msg = f"Unknown entry type {value!r}; expected one of: {allowed}"
        raise BadRequest(msg) from None


class EntryStore:
    """CRUD for blog entries.

    Usage::

        store = EntryStore(db)
        entry = await store.create("text", {"text": "hello"}, published=True)
        page = await store.list_published(limit=20)
    """

    __slots__ = ("_db",)

    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_published(self, before: str | None = None, limit: int = 20) -> list[Entry]:
        """Published entries, newest first, optionally older than *before*."""
        sql = f"SELECT {_SUMMARY_COLUMNS} FROM entries WHERE published = 1"
        params: list[Any] = []
        if before:
            sql += " AND created_at < ?"
            params.append(before)
        sql += " ORDER BY created_at DESC, id DESC LIMIT ?"
        params.append(limit)
        return await self._db.fetch(Entry, sql, *params)

    async def list_all(self) -> list[Entry]:
        return await self._db.fetch(
            Entry, "SELECT * FROM entries ORDER BY created_at DESC, id DESC"
        )

    async def get(self, entry_id: int | str) -> Entry | None:
        return await self._db.fetch_one(Entry, "SELECT * FROM entries WHERE id = ?", entry_id)

    async def create(
        self,
        type: Any,
        content: Any,
        published: Any = False,
        metadata: Any = None,
    ) -> Entry:
        """Insert an entry at the end of the manual ordering and return it."""
        entry_type = _entry_type(type)
        new_id = await self._db.insert(
            "INSERT INTO entries (type, content, published, metadata, position_index) "
            "VALUES (?, ?, ?, ?, "
            "(SELECT COALESCE(MAX(position_index), 0) + 1 FROM entries))",
            entry_type.value,
            json.dumps(content),
            1 if published else 0,
            json.dumps(metadata) if metadata else None,
        )
        logger.info("Created %s entry %d", entry_type.value, new_id)
        entry = await self.get(new_id)
        if entry is None:
            msg = f"Entry {new_id} vanished after insert"
            raise DataError(msg)
        return entry

    async def update(
        self,
        entry_id: int | str,
        *,
        content: Any = _UNSET,
        published: Any = _UNSET,
        metadata: Any = _UNSET,
    ) -> Entry | None:
        """Change only the given fields; ``updated_at`` always moves.

        Returns the updated entry, or ``None`` when it does not exist.
        """
        updates: list[str] = []
        params: list[Any] = []
        if content is not _UNSET:
            updates.append("content = ?")
            params.append(json.dumps(content))
        if published is not _UNSET:
            updates.append("published = ?")
            params.append(1 if published else 0)
        if metadata is not _UNSET:
            updates.append("metadata = ?")
            params.append(json.dumps(metadata))
        updates.append("updated_at = CURRENT_TIMESTAMP")
        params.append(entry_id)

        changed = await self._db.execute(
            f"UPDATE entries SET {', '.join(updates)} WHERE id = ?", *params
        )
        if not changed:
            return None
        return await self.get(entry_id)

    async def delete(self, entry_id: int | str) -> bool:
        """Remove an entry. Returns False if nothing was deleted."""
        deleted = await self._db.execute("DELETE FROM entries WHERE id = ?", entry_id)
        if deleted:
            logger.info("Deleted entry %s", entry_id)
        return bool(deleted)


class CanvasStore:
    """Create and fetch canvases."""

    __slots__ = ("_db",)

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(
        self,
        title: str | None,
        background: Any,
        dimensions: Any,
        elements: Any,
        published: Any = False,
    ) -> Canvas:
        new_id = await self._db.insert(
            "INSERT INTO canvases (title, background, dimensions, elements, published, "
            "position_index) VALUES (?, ?, ?, ?, ?, "
            "(SELECT COALESCE(MAX(position_index), 0) + 1 FROM canvases))",
            title,
            json.dumps(background),
            json.dumps(dimensions),
            json.dumps(elements),
            1 if published else 0,
        )
        logger.info("Created canvas %d", new_id)
        canvas = await self.get(new_id)
        if canvas is None:
            msg = f"Canvas {new_id} vanished after insert"
            raise DataError(msg)
        return canvas

    async def get(self, canvas_id: int | str) -> Canvas | None:
        return await self._db.fetch_one(Canvas, "SELECT * FROM canvases WHERE id = ?", canvas_id)
