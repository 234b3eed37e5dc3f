"""Infinite Canvas: the blog CMS behind ``/blog`` and ``/admin``."""

from folio.cms.feed import build_rss
from folio.cms.giphy import GiphyClient, GiphyError
from folio.cms.models import Canvas, Entry, EntryType
from folio.cms.render import PageRenderer, create_environment
from folio.cms.storage import ImageBucket, StorageError, StoredObject
from folio.cms.store import CanvasStore, EntryStore

__all__ = [
    "Canvas",
    "CanvasStore",
    "Entry",
    "EntryStore",
    "EntryType",
    "GiphyClient",
    "GiphyError",
    "ImageBucket",
    "PageRenderer",
    "StorageError",
    "StoredObject",
    "build_rss",
    "create_environment",
]
