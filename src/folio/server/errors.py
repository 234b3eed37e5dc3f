"""Error handling pipeline for folio requests.

Maps HTTPError exceptions and unexpected failures to Responses. JSON
clients get ``{"error": detail}``; everyone else gets plain text.
"""

import logging
import traceback

from folio.errors import HTTPError
from folio.http.request import Request
from folio.http.response import Response

logger = logging.getLogger("folio.server")


def wants_json(request: Request) -> bool:
    """True when the client sent or asked for JSON."""
    content_type = request.content_type or ""
    return request.headers.accepts("application/json") or content_type.startswith(
        "application/json"
    )


def _error_body(request: Request, status: int, detail: str) -> Response:
    if wants_json(request):
        return Response.from_json({"error": detail}, status=status)
    return Response.plain(detail, status=status)


def handle_http_error(exc: HTTPError, request: Request, debug: bool) -> Response:
    """Map an HTTPError to a Response carrying its status and headers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    response = _error_body(request, exc.status, detail)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """Log an unexpected exception and answer 500."""
    logger.exception("500 %s %s", request.method, request.path)
    if debug:
        detail = "".join(traceback.format_exception(exc))
        return Response.plain(detail, status=500)
    return _error_body(request, 500, "Internal Server Error")
