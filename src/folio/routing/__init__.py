"""Routing: ordered pattern registry with first-match resolution.

The same ``:param`` pattern matcher backs the page router (history,
scroll, and live-region side effects through a ``Browser`` port) and the
server's method-aware route table.
"""

from folio.routing.browser import Browser, Document, Element, HeadlessBrowser
from folio.routing.links import ClickEvent, LinkInterceptor
from folio.routing.pattern import describe_path, match_route, normalize_path
from folio.routing.route import Route, RouteMatch
from folio.routing.router import Router

__all__ = [
    "Browser",
    "ClickEvent",
    "Document",
    "Element",
    "HeadlessBrowser",
    "LinkInterceptor",
    "Route",
    "RouteMatch",
    "Router",
    "describe_path",
    "match_route",
    "normalize_path",
]
