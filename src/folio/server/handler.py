"""ASGI handler: translates ASGI scope/messages to folio types.

The only component that touches raw HTTP ASGI messages. Builds a
``Request``, runs it through middleware and the route table, and sends
the resulting ``Response``.
"""

from collections.abc import Callable
from typing import Any

from folio._internal.invoke import invoke
from folio._internal.types import Receive, Scope, Send
from folio.errors import HTTPError
from folio.http.request import Request
from folio.http.response import Response
from folio.server.errors import handle_http_error, handle_internal_error
from folio.server.negotiation import negotiate
from folio.server.routes import RouteTable
from folio.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    routes: RouteTable,
    middleware: tuple[Callable[..., Any], ...] = (),
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    async def dispatch(req: Request) -> Response:
        match = routes.match(req.method, req.path)
        result = await invoke(match.route.handler, req.with_path_params(match.params))
        return negotiate(result)

    handler = dispatch
    for mw in reversed(middleware):

        async def make_next(req: Request, _mw: Any = mw, _next: Any = handler) -> Response:
            return await _mw(req, _next)

        handler = make_next

    try:
        response = await handler(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)

    await send_response(response, send, head=request.method == "HEAD")
