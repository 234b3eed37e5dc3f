"""GIF search proxy for the admin editor.

Raw HTTP via httpx against the GIPHY search API; the response JSON is
passed through untouched.
"""

import logging
from typing import Any

import httpx

from folio.errors import FolioError

logger = logging.getLogger("folio.cms")

SEARCH_URL = "https://api.giphy.com/v1/gifs/search"


class GiphyError(FolioError):
    """Raised when GIPHY cannot be reached or answers with an error."""

    def __init__(self, status: int, detail: str) -> None:
        self.status = status
        self.detail = detail
        super().__init__(f"GIPHY returned {status}: {detail}")


class GiphyClient:
    """Search GIPHY with a fixed result limit and content rating.

    ``transport`` is handed to ``httpx.AsyncClient``; tests pass an
    ``httpx.MockTransport``.
    """

    __slots__ = ("_api_key", "_limit", "_rating", "_timeout", "_transport")

    def __init__(
        self,
        api_key: str,
        *,
        limit: int = 12,
        rating: str = "g",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._limit = limit
        self._rating = rating
        self._timeout = timeout
        self._transport = transport

    async def search(self, query: str) -> dict[str, Any]:
        params = {
            "api_key": self._api_key,
            "q": query,
            "limit": str(self._limit),
            "rating": self._rating,
        }
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.get(SEARCH_URL, params=params)
        except httpx.HTTPError as exc:
            logger.warning("GIPHY request failed: %s", exc)
            raise GiphyError(502, str(exc)) from exc

        if response.status_code != 200:
            raise GiphyError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as exc:
            raise GiphyError(502, "Response was not JSON") from exc
