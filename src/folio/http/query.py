"""Query string of a request.

Only the first value of a repeated key is kept. The CMS endpoints
read three keys, and each has a named accessor here so blank or
whitespace-only values are treated as absent in one place.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Decoded query parameters, first value per key.

    Usage::

        query = QueryParams(b"before=2024-06-01%2012%3A00%3A00&format=json")
        query.before       # "2024-06-01 12:00:00"
        query.wants_json   # True
        query["format"]    # "json"
    """

    __slots__ = ("_values",)

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        values: dict[str, str] = {}
        for key, value in parse_qsl(query_string, keep_blank_values=True):
            values.setdefault(key, value)
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def text(self, key: str) -> str | None:
        """The stripped value of *key*, or ``None`` when missing or blank."""
        return self._values.get(key, "").strip() or None

    @property
    def before(self) -> str | None:
        """Pagination cursor: only entries created before this timestamp."""
        return self.text("before")

    @property
    def search(self) -> str | None:
        """The ``q`` search term."""
        return self.text("q")

    @property
    def wants_json(self) -> bool:
        """``?format=json`` asks an HTML endpoint for its JSON form."""
        return (self.text("format") or "").lower() == "json"
