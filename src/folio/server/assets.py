"""Public assets and the single-page-app shell.

Middleware in front of the CMS route table. For any path outside the
CMS it answers GET and HEAD itself:

- extensionless paths (``/``, ``/apps/hotbox``) get the shell document
  with the page the site router renders for that path (404 when it
  renders the not-found page);
- other paths are files under the public directory, sent with a
  content type by extension, long-lived caching and security headers;
- anything else is a 404.

CMS paths always go to the route table and never fall through to the
shell, even when they do not match a route.
"""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Awaitable, Callable
from pathlib import Path

import anyio

from folio._internal.types import Next
from folio.errors import NotFound
from folio.http.request import Request
from folio.http.response import Response

logger = logging.getLogger("folio.server")

CMS_PREFIXES: tuple[str, ...] = ("/blog", "/admin", "/images/")
CMS_PATHS: frozenset[str] = frozenset({"/rss.xml"})

CONTENT_TYPES: dict[str, str] = {
    ".js": "application/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".woff2": "font/woff2",
    ".woff": "font/woff",
    ".html": "text/html; charset=utf-8",
}

ASSET_HEADERS: tuple[tuple[str, str], ...] = (
    ("Cache-Control", "public, max-age=31536000, immutable"),
    ("X-XSS-Protection", "1; mode=block"),
    ("X-Content-Type-Options", "nosniff"),
    ("X-Frame-Options", "DENY"),
    ("Referrer-Policy", "unsafe-url"),
)


def is_cms_path(path: str) -> bool:
    return path in CMS_PATHS or path.startswith(CMS_PREFIXES)


def content_type_for(path: str) -> str:
    suffix = Path(path).suffix.lower()
    if suffix in CONTENT_TYPES:
        return CONTENT_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path)
    return guessed or "application/octet-stream"


class SiteAssets:
    """Serve the shell and public files; hand CMS paths to the next handler.

    ``shell`` renders the document for one extensionless path and is
    called on every such request.

    Usage::

        async def shell(path: str) -> Response:
            page = await render_location(path, config, content)
            return Response(body=renderer.shell(content.site, page), status=page.status)

        assets = SiteAssets("public", shell=shell)
    """

    __slots__ = ("_directory", "_shell")

    def __init__(
        self, directory: str | Path, shell: Callable[[str], Awaitable[Response]]
    ) -> None:
        self._directory = Path(directory).resolve()
        self._shell = shell

    @property
    def directory(self) -> Path:
        return self._directory

    async def __call__(self, request: Request, next: Next) -> Response:
        path = request.path
        if is_cms_path(path) or request.method not in ("GET", "HEAD"):
            return await next(request)

        if "." not in path:
            return await self._shell(path)

        return await self._serve_file(path)

    async def _serve_file(self, path: str) -> Response:
        file_path = (self._directory / path.lstrip("/")).resolve()
        if not file_path.is_relative_to(self._directory):
            logger.warning("Refused asset path outside public directory: %s", path)
            msg = f"No asset at {path!r}"
            raise NotFound(msg)

        target = anyio.Path(file_path)
        if not await target.is_file():
            msg = f"No asset at {path!r}"
            raise NotFound(msg)

        response = Response(body=await target.read_bytes(), content_type=content_type_for(path))
        for name, value in ASSET_HEADERS:
            response = response.with_header(name, value)
        return response
