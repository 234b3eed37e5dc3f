"""CMS records: blog entries and canvases.

Rows keep their JSON columns as text so the JSON API returns what is
stored; the ``*_data`` helpers decode on demand.
"""

import json
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class EntryType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    GIF = "gif"
    QUOTE = "quote"


def _loads(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except ValueError:
        return {}
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True, slots=True)
class Entry:
    """One blog entry. ``content`` and ``metadata`` hold JSON text."""

    id: int
    type: str
    content: str
    created_at: str
    updated_at: str | None = None
    published: int = 1
    metadata: str | None = None
    position_index: int | None = None

    @property
    def content_data(self) -> dict[str, Any]:
        return _loads(self.content)

    @property
    def metadata_data(self) -> dict[str, Any]:
        """Decoded metadata; unreadable metadata counts as empty."""
        return _loads(self.metadata)

    @property
    def is_published(self) -> bool:
        return bool(self.published)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def summary(self) -> dict[str, Any]:
        """The public listing columns: no publish state or ordering."""
        return {
            "id": self.id,
            "type": self.type,
            "content": self.content,
            "created_at": self.created_at,
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class Canvas:
    """A composed canvas. ``background``, ``dimensions`` and ``elements`` hold JSON text."""

    id: int
    background: str
    dimensions: str
    elements: str
    created_at: str
    title: str | None = None
    updated_at: str | None = None
    published: int = 0
    position_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """The row with its JSON columns decoded."""
        data = asdict(self)
        for name in ("background", "dimensions", "elements"):
            data[name] = json.loads(data[name])
        return data
