"""HTTP server: ASGI app, request pipeline, CMS endpoints, assets."""

from folio.server.app import SiteApp
from folio.server.negotiation import negotiate
from folio.server.routes import RouteTable

__all__ = [
    "RouteTable",
    "SiteApp",
    "negotiate",
]
