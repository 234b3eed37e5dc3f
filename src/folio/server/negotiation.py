"""Content negotiation: maps handler return values to Response objects.

isinstance-based dispatch, nothing implicit.
"""

from typing import Any

from folio.http.response import Redirect, Response


def negotiate(value: Any) -> Response:
    """Convert an endpoint's return value to a Response.

    Dispatch order:

    1. ``Response``          -> pass through
    2. ``Redirect``          -> status with Location header
    3. ``str``               -> 200, text/html
    4. ``bytes``             -> 200, application/octet-stream
    5. ``dict`` / ``list``   -> 200, application/json
    6. ``(value, int)``      -> negotiate value, override status
    7. ``(value, int, dict)`` -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case Redirect():
            return value.to_response()
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response.from_json(value)
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return str, bytes, dict, list, Response, or Redirect."
            )
            raise TypeError(msg)
