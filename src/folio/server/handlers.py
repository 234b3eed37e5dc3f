"""CMS endpoints: blog, feed, admin editing, uploads, canvases, GIF search.

Endpoints take the request and return anything ``negotiate()``
understands: HTML strings, JSON-able dicts, ``(value, status)`` tuples,
``Redirect`` or a finished ``Response``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from folio.cms.feed import build_rss
from folio.cms.giphy import GiphyClient, GiphyError
from folio.cms.render import PageRenderer
from folio.cms.storage import ImageBucket, StorageError
from folio.cms.store import CanvasStore, EntryStore
from folio.config import SiteConfig
from folio.errors import BadRequest, NotFound
from folio.http.request import Request
from folio.http.response import Redirect, Response
from folio.server.routes import RouteTable

logger = logging.getLogger("folio.server")

IMMUTABLE_CACHE = "public, max-age=31536000, immutable"


@dataclass(frozen=True, slots=True)
class Services:
    """What the CMS endpoints work with, built once per application."""

    config: SiteConfig
    entries: EntryStore
    canvases: CanvasStore
    images: ImageBucket
    giphy: GiphyClient
    renderer: PageRenderer


def _record_id(request: Request, name: str = "id") -> int:
    raw = request.path_params.get(name, "")
    if not (raw.isascii() and raw.isdigit()):
        msg = f"No record with id {raw!r}"
        raise NotFound(msg)
    return int(raw)


async def _json_object(request: Request) -> dict[str, Any]:
    data = await request.json()
    if not isinstance(data, dict):
        msg = "Expected a JSON object"
        raise BadRequest(msg)
    return data


class Endpoints:
    """The CMS request handlers, bound to one set of services."""

    __slots__ = ("_services",)

    def __init__(self, services: Services) -> None:
        self._services = services

    # -- Public blog --

    async def blog(self, request: Request) -> Any:
        services = self._services
        entries = await services.entries.list_published(
            before=request.query.before,
            limit=services.config.blog_page_size,
        )
        if request.query.wants_json:
            return {"entries": [entry.summary() for entry in entries]}
        return services.renderer.blog(entries)

    async def blog_entry(self, request: Request) -> Redirect:
        return Redirect(f"/blog#entry-{_record_id(request)}")

    async def rss(self, request: Request) -> Response:
        services = self._services
        entries = await services.entries.list_published(limit=services.config.feed_size)
        return Response(
            body=build_rss(entries, request.host),
            content_type="application/rss+xml; charset=utf-8",
        )

    # -- Admin: entries --

    async def admin(self, request: Request) -> str:  # noqa: ARG002
        entries = await self._services.entries.list_all()
        return self._services.renderer.admin(entries)

    async def create_entry(self, request: Request) -> tuple[dict[str, Any], int]:
        data = await _json_object(request)
        entry = await self._services.entries.create(
            data.get("type"),
            data.get("content"),
            published=data.get("published", False),
            metadata=data.get("metadata"),
        )
        return entry.to_dict(), 201

    async def update_entry(self, request: Request) -> dict[str, Any]:
        entry_id = _record_id(request)
        data = await _json_object(request)
        fields = {k: data[k] for k in ("content", "published", "metadata") if k in data}
        entry = await self._services.entries.update(entry_id, **fields)
        if entry is None:
            msg = f"Entry {entry_id} not found"
            raise NotFound(msg)
        return entry.to_dict()

    async def delete_entry(self, request: Request) -> dict[str, bool]:
        await self._services.entries.delete(_record_id(request))
        return {"success": True}

    # -- Admin: images --

    async def upload(self, request: Request) -> Any:
        form = await request.form()
        upload = form.files.get("file")
        if upload is None:
            return {"error": "No file provided"}, 400

        limit = self._services.config.max_upload_size
        if upload.size > limit:
            return {"error": f"File exceeds {limit} bytes"}, 413

        try:
            key = await self._services.images.put(
                upload.filename, await upload.read(), upload.content_type
            )
        except StorageError as exc:
            raise BadRequest(str(exc)) from exc
        logger.info("Stored upload %s (%d bytes)", key, upload.size)
        return {"url": f"/images/{key}"}

    async def image(self, request: Request) -> Response:
        key = request.path_params.get("filename", "")
        stored = await self._services.images.get(key)
        if stored is None:
            msg = f"Image {key!r} not found"
            raise NotFound(msg)
        return Response(body=stored.body, content_type=stored.content_type).with_header(
            "Cache-Control", IMMUTABLE_CACHE
        )

    # -- Admin: canvases --

    async def canvas_creator(self, request: Request) -> str:  # noqa: ARG002
        return self._services.renderer.canvas_creator()

    async def create_canvas(self, request: Request) -> tuple[dict[str, Any], int]:
        data = await _json_object(request)
        if "elements" not in data:
            msg = "Canvas requires 'elements'"
            raise BadRequest(msg)
        canvas = await self._services.canvases.create(
            data.get("title"),
            data.get("background"),
            data.get("dimensions"),
            data["elements"],
            published=data.get("published", False),
        )
        return canvas.to_dict(), 201

    async def canvas(self, request: Request) -> dict[str, Any]:
        canvas_id = _record_id(request)
        canvas = await self._services.canvases.get(canvas_id)
        if canvas is None:
            msg = f"Canvas {canvas_id} not found"
            raise NotFound(msg)
        return canvas.to_dict()

    # -- Admin: GIF search --

    async def giphy(self, request: Request) -> Any:
        query = request.query.search
        if not query:
            return {"error": "Query required"}, 400
        if not self._services.config.giphy_api_key:
            return {"error": "GIF search is not configured"}, 503
        try:
            return await self._services.giphy.search(query)
        except GiphyError as exc:
            return {"error": exc.detail}, exc.status


def register_endpoints(table: RouteTable, services: Services) -> Endpoints:
    """Add every CMS endpoint to *table*."""
    endpoints = Endpoints(services)
    table.add("/blog", endpoints.blog)
    table.add("/blog/entry/:id", endpoints.blog_entry)
    table.add("/rss.xml", endpoints.rss)
    table.add("/admin", endpoints.admin)
    table.add("/admin/entry", endpoints.create_entry, methods=("POST",))
    table.add("/admin/entry/:id", endpoints.update_entry, methods=("PUT",))
    table.add("/admin/entry/:id", endpoints.delete_entry, methods=("DELETE",))
    table.add("/admin/upload", endpoints.upload, methods=("POST",))
    table.add("/images/:filename", endpoints.image)
    table.add("/admin/create", endpoints.canvas_creator)
    table.add("/admin/canvas", endpoints.create_canvas, methods=("POST",))
    table.add("/admin/canvas/:id", endpoints.canvas)
    table.add("/admin/giphy", endpoints.giphy)
    return endpoints
