"""Folio exception hierarchy.

Shared across the router, server, data layer, and CMS so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class FolioError(Exception):
    """Base for all folio-specific errors."""


class ConfigurationError(FolioError):
    """Raised when site configuration is invalid.

    Typically raised by ``SiteConfig.from_env()`` at startup.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(FolioError):
    """An error that maps directly to an HTTP status code.

    Raised by the route table, stores, or handlers. The ASGI handler
    catches these and turns them into a response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400: the request is missing something the handler needs."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched, or the addressed record does not exist."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
