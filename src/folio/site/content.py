"""Site content: metadata, navigation, and page records.

Everything lives in one ``content.json`` with three keys::

    {
      "site": {"title": ..., "description": ..., "author": ..., "email": ..., "url": ...},
      "navigation": [{"title": "Apps", "path": "/apps", "id": "apps", "children": [...]}],
      "pages": {"apps": {"title": "Apps", "meta": {"description": ...}}}
    }

Long-form pages point at a Markdown file (``"markdown": "content/x.md"``,
relative to the JSON file) that is read on demand and cached. Song
collections work the same way through a JSON file (``"songs": ...``).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import anyio

from folio.errors import ConfigurationError

logger = logging.getLogger("folio.content")


@dataclass(frozen=True, slots=True)
class SiteInfo:
    """The ``site`` block of content.json."""

    title: str
    description: str = ""
    author: str = ""
    email: str = ""
    url: str = ""


@dataclass(frozen=True, slots=True)
class Breadcrumb:
    title: str
    path: str


@dataclass(frozen=True, slots=True)
class Song:
    """One entry of a song collection; ``lyrics`` is trusted HTML or ``None``."""

    title: str
    lyrics: str | None = None


class ContentLoader:
    """Read-only access to the site's content file.

    Usage::

        content = ContentLoader("src/folio/site/content.json")
        content.site.title
        content.get_page("apps")
        content.get_page_by_path("/apps/wordbird")
        text = await content.load_markdown("content/ideas/27-suppositions.md")
        songs = await content.load_songs("content/songs.json")
    """

    __slots__ = ("_data", "_markdown_cache", "_root", "_site", "_songs_cache")

    def __init__(self, content_file: str | Path) -> None:
        path = Path(content_file)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Cannot load site content from {path}: {exc}"
            raise ConfigurationError(msg) from exc

        if not isinstance(data, dict) or "site" not in data:
            msg = f"{path} has no 'site' section"
            raise ConfigurationError(msg)

        self._data: dict[str, Any] = data
        self._root = path.parent
        self._site = SiteInfo(
            **{k: str(v) for k, v in data["site"].items() if k in SiteInfo.__dataclass_fields__}
        )
        self._markdown_cache: dict[str, str] = {}
        self._songs_cache: dict[str, list[Song]] = {}

    @property
    def root(self) -> Path:
        return self._root

    @property
    def site(self) -> SiteInfo:
        return self._site

    @property
    def navigation(self) -> list[dict[str, Any]]:
        return self._data.get("navigation", [])

    @property
    def pages(self) -> dict[str, dict[str, Any]]:
        return self._data.get("pages", {})

    # -- Lookups --

    def get_page(self, page_id: str) -> dict[str, Any] | None:
        return self.pages.get(page_id)

    def _walk_navigation(
        self, items: Sequence[Mapping[str, Any]] | None = None
    ) -> Iterator[Mapping[str, Any]]:
        for item in self.navigation if items is None else items:
            yield item
            yield from self._walk_navigation(item.get("children", ()))

    def find_nav_item(self, item_id: str) -> Mapping[str, Any] | None:
        """The navigation entry with *item_id*, searching children too."""
        for item in self._walk_navigation():
            if item.get("id") == item_id:
                return item
        return None

    def get_page_by_path(self, path: str) -> dict[str, Any] | None:
        """The page record whose navigation entry has *path*."""
        for item in self._walk_navigation():
            if item.get("path") == path:
                return self.get_page(str(item.get("id", "")))
        return None

    def get_pages_by_property(self, name: str, value: Any) -> dict[str, dict[str, Any]]:
        return {page_id: page for page_id, page in self.pages.items() if page.get(name) == value}

    def placeholder_pages(self) -> dict[str, dict[str, Any]]:
        return self.get_pages_by_property("placeholder", True)

    def breadcrumbs(self, path: str) -> list[Breadcrumb]:
        """Home, then one crumb per path prefix that has a navigation entry."""
        crumbs = [Breadcrumb(title="Home", path="/")]
        segments = [segment for segment in path.split("/") if segment]
        by_path = {item.get("path"): item for item in self._walk_navigation()}
        for i in range(1, len(segments) + 1):
            prefix = "/" + "/".join(segments[:i])
            item = by_path.get(prefix)
            if item is not None:
                crumbs.append(Breadcrumb(title=str(item.get("title", "")), path=prefix))
        return crumbs

    def document_title(self, page_title: str | None = None) -> str:
        if page_title:
            return f"{page_title} - {self._site.title}"
        return self._site.title

    # -- Linked files --

    async def load_markdown(self, path: str) -> str:
        """Read a Markdown file relative to the content root.

        Successful reads are cached. A failed read logs an error and
        returns a short error document so the page still renders.
        """
        cached = self._markdown_cache.get(path)
        if cached is not None:
            return cached

        try:
            text = await anyio.Path(self._root / path).read_text(encoding="utf-8")
        except OSError:
            logger.exception("Failed to load markdown from %s", path)
            return f"# Error\n\nFailed to load content from {path}"

        self._markdown_cache[path] = text
        return text

    async def load_songs(self, path: str) -> list[Song]:
        """Read a JSON list of ``{"title", "lyrics"}`` records relative to the content root.

        A missing or malformed file logs an error and yields no songs.
        """
        cached = self._songs_cache.get(path)
        if cached is not None:
            return cached

        try:
            records = json.loads(await anyio.Path(self._root / path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.exception("Failed to load songs from %s", path)
            return []

        songs = [
            Song(title=str(record["title"]), lyrics=record.get("lyrics") or None)
            for record in records
            if isinstance(record, dict) and record.get("title")
        ]
        self._songs_cache[path] = songs
        return songs

    def clear_cache(self) -> None:
        self._markdown_cache.clear()
        self._songs_cache.clear()
