"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal: ``/blog``   (is_param=False)
    Param:   ``/:slug``  (is_param=True, param_name="slug")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered pattern and the handler it dispatches to.

    ``methods`` is only meaningful for the server route table; page
    routes leave it empty.
    """

    pattern: str
    handler: Callable[..., Any]
    methods: frozenset[str] = frozenset()
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]
