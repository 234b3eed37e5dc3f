"""Request headers, decoded once when the request is built.

Names are folded to lowercase. A repeated header keeps its first
value, which is all the endpoints read.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Case-insensitive, read-only view of the request headers.

    Usage::

        headers = Headers.from_asgi(scope["headers"])
        headers["Content-Type"]
        headers.accepts("application/json")
    """

    __slots__ = ("_values",)

    def __init__(self, pairs: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        values: dict[str, str] = {}
        for name, value in items:
            values.setdefault(name.lower(), value)
        self._values = values

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Decode the byte pairs of an ASGI scope (latin-1, as HTTP/1.1 sends them)."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def accepts(self, media_type: str) -> bool:
        """True when the ``Accept`` header names *media_type*."""
        return media_type in self.get("accept", "")
