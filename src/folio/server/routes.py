"""Method-aware route table for the HTTP server.

Shares the page router's ``:param`` matcher and its precedence: an
exact pattern wins over a parameterized one, and registration order
breaks ties between parameterized patterns.
"""

from collections.abc import Callable, Iterable
from typing import Any

from folio.errors import ConfigurationError, MethodNotAllowed, NotFound
from folio.routing.pattern import match_route, normalize_path, parse_pattern
from folio.routing.route import Route, RouteMatch


class RouteTable:
    """Ordered server routes keyed by pattern and method.

    Usage::

        table = RouteTable()
        table.add("/blog/entry/:id", show_entry, methods=("GET",))
        match = table.match("GET", "/blog/entry/7")  # params {"id": "7"}
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[Route] = []

    def add(
        self,
        pattern: str,
        handler: Callable[..., Any],
        methods: Iterable[str] = ("GET",),
        name: str | None = None,
    ) -> None:
        names = [seg.param_name for seg in parse_pattern(pattern) if seg.is_param]
        if len(names) != len(set(names)):
            msg = f"Duplicate parameter name in route pattern {pattern!r}"
            raise ConfigurationError(msg)
        self._routes.append(
            Route(
                pattern=pattern,
                handler=handler,
                methods=frozenset(m.upper() for m in methods),
                name=name or getattr(handler, "__name__", None),
            )
        )

    def route(
        self, pattern: str, *, methods: Iterable[str] = ("GET",)
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of :meth:`add`."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.add(pattern, handler, methods)
            return handler

        return decorator

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the route for *method* and *path*.

        Raises:
            NotFound: If no pattern matches the path.
            MethodNotAllowed: If patterns match but none accepts *method*.
        """
        path = normalize_path(path)
        candidates = [r for r in self._routes if r.pattern == path]
        candidates += [
            r for r in self._routes if r.pattern != path and match_route(r.pattern, path) is not None
        ]
        if not candidates:
            msg = f"No route matches {method} {path!r}"
            raise NotFound(msg)

        method = method.upper()
        for route in candidates:
            if method in route.methods or (method == "HEAD" and "GET" in route.methods):
                return RouteMatch(route=route, params=match_route(route.pattern, path) or {})

        allowed: set[str] = set()
        for route in candidates:
            allowed |= route.methods
        raise MethodNotAllowed(frozenset(allowed))
