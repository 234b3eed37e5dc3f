"""Filesystem object storage for uploaded images.

Each object is a file in the bucket directory plus a ``.meta.json``
sidecar recording its content type. File I/O runs through
``anyio.Path`` so handlers never block the event loop.
"""

import json
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path

import anyio

from folio.errors import FolioError

logger = logging.getLogger("folio.cms")

_UNSAFE = re.compile(r"[^a-zA-Z0-9.-]")
_META_SUFFIX = ".meta.json"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StorageError(FolioError):
    """Raised for object keys that would leave the bucket directory."""


@dataclass(frozen=True, slots=True)
class StoredObject:
    key: str
    body: bytes
    content_type: str


def sanitize_filename(name: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9.-]`` with ``_``."""
    return _UNSAFE.sub("_", name)


def object_key(filename: str, now_ms: int | None = None) -> str:
    """``"<epoch millis>-<sanitized filename>"``.

    A name ending in the metadata sidecar suffix has its last dot
    replaced (``notes.meta.json`` becomes ``notes.meta_json``) so the
    object cannot collide with a sidecar.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    name = sanitize_filename(filename)
    if name.endswith(_META_SUFFIX):
        name = name.removesuffix(".json") + "_json"
    return f"{now_ms}-{name}"


class ImageBucket:
    """A directory of uploaded objects addressed by key.

    Usage::

        bucket = ImageBucket("images")
        key = await bucket.put("my photo.png", data, "image/png")
        obj = await bucket.get(key)   # StoredObject or None
    """

    __slots__ = ("_root",)

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if (
            not key
            or "/" in key
            or "\\" in key
            or key in (".", "..")
            or key.endswith(_META_SUFFIX)
        ):
            msg = f"Invalid object key: {key!r}"
            raise StorageError(msg)
        path = (self._root / key).resolve()
        if path.parent != self._root.resolve():
            msg = f"Object key escapes the bucket: {key!r}"
            raise StorageError(msg)
        return path

    async def put(self, filename: str, data: bytes, content_type: str | None = None) -> str:
        """Store *data* under a fresh timestamped key and return the key."""
        key = object_key(filename)
        path = self._path(key)
        await anyio.Path(self._root).mkdir(parents=True, exist_ok=True)
        await anyio.Path(path).write_bytes(data)
        meta = {"content_type": content_type or DEFAULT_CONTENT_TYPE}
        await anyio.Path(f"{path}{_META_SUFFIX}").write_text(json.dumps(meta), encoding="utf-8")
        logger.info("Stored %s (%d bytes)", key, len(data))
        return key

    async def get(self, key: str) -> StoredObject | None:
        """Fetch an object, or ``None`` if the key is unknown or invalid."""
        try:
            path = self._path(key)
        except StorageError:
            logger.warning("Rejected object key %r", key)
            return None

        file = anyio.Path(path)
        if not await file.is_file():
            return None
        body = await file.read_bytes()

        content_type = DEFAULT_CONTENT_TYPE
        meta = anyio.Path(f"{path}{_META_SUFFIX}")
        if await meta.is_file():
            try:
                content_type = json.loads(await meta.read_text(encoding="utf-8"))["content_type"]
            except (ValueError, KeyError):
                logger.warning("Unreadable metadata for %s", key)
        return StoredObject(key=key, body=body, content_type=content_type)
