"""Immutable HTTP request.

Frozen metadata with async body access.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from folio._internal.types import Receive, Scope
from folio.errors import BadRequest
from folio.http.headers import Headers
from folio.http.query import QueryParams

if TYPE_CHECKING:
    from folio.http.forms import FormData


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, ...) is frozen at creation. The
    body is read once through ``.body()``, ``.json()`` or ``.form()``
    and cached.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    _receive: Receive

    # The dict is mutable even though the field is frozen.
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def host(self) -> str:
        """The ``Host`` header, falling back to the server address."""
        host = self.headers.get("host")
        if host:
            return host
        if self.server is not None:
            return f"{self.server[0]}:{self.server[1]}"
        return "localhost"

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body (cached after the first call)."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            BadRequest: If the body is empty or not valid JSON.
        """
        raw = await self.body()
        try:
            return json.loads(raw)
        except ValueError as exc:
            msg = f"Invalid JSON body: {exc}"
            raise BadRequest(msg) from exc

    async def form(self) -> FormData:
        """Parse the body as URL-encoded or multipart form data (cached)."""
        if "_form" in self._cache:
            return self._cache["_form"]

        from folio.http.forms import parse_form_data

        ct = self.content_type or "application/x-www-form-urlencoded"
        result = parse_form_data(await self.body(), ct)
        self._cache["_form"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        path_params: dict[str, str] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers.from_asgi(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            path_params=path_params or {},
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    def with_path_params(self, params: dict[str, str]) -> Request:
        """Return a copy carrying the params captured by the route table."""
        return replace(self, path_params=params)
