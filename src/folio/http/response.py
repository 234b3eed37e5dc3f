"""Responses returned by the site and the CMS endpoints.

A ``Response`` is frozen; ``with_status`` and ``with_header`` return
changed copies. The constructors cover the three bodies the CMS
sends: rendered HTML (the default), JSON and plain text.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_TYPE = "application/json; charset=utf-8"
TEXT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """Status, content type, extra headers and a body.

    Usage::

        Response(body=html)
        Response.from_json({"id": 7}, status=201)
        Response.plain("Not found", status=404).with_header("Cache-Control", "no-store")
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_json(cls, data: Any, status: int = 200) -> Response:
        """Serialize *data*; timestamps and other objects fall back to ``str``."""
        return cls(body=json.dumps(data, default=str), status=status, content_type=JSON_TYPE)

    @classmethod
    def plain(cls, text: str, status: int = 200) -> Response:
        return cls(body=text, status=status, content_type=TEXT_TYPE)

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> Response:
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        return replace(self, headers=(*self.headers, *pairs))

    def header(self, name: str) -> str | None:
        """First value of the extra header *name*, case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """Return value of an endpoint that sends the client elsewhere."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()

    def to_response(self) -> Response:
        return Response(status=self.status).with_header("Location", self.url).with_headers(
            self.headers
        )
