"""Page router with history, scroll, and live-region side effects.

Resolves a path to exactly one handler: an exact pattern first, then
the first parameterized pattern in registration order, then the
not-found handler. The browser is the history stack; the router keeps
only the registry and the last resolved path.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from folio.routing.browser import Browser, Element
from folio.routing.pattern import describe_path, match_route, normalize_path
from folio.routing.route import Route, RouteMatch

logger = logging.getLogger("folio.router")

ANNOUNCER_ID = "route-announcement"


class Router:
    """Ordered registry of page routes bound to one ``Browser``.

    Usage::

        router = Router(browser)
        router.register("/", render_home).register("/blog/:slug", render_post)
        router.set_not_found(render_404)
        router.initialize()

        router.navigate("/blog/hello-world")  # handler gets {"slug": "hello-world"}

    Handlers are called with the captured params mapping, or with no
    arguments when they take none. A handler that returns an awaitable
    is scheduled and not awaited; overlapping navigations may race.
    Exceptions raised by a handler propagate to the caller.
    """

    __slots__ = ("_browser", "_current_route", "_not_found", "_pending", "_routes")

    def __init__(self, browser: Browser) -> None:
        self._browser = browser
        self._routes: list[Route] = []
        self._not_found: Callable[..., Any] | None = None
        self._current_route: str | None = None
        self._pending: set[asyncio.Task[Any]] = set()
        browser.add_popstate_listener(lambda _state: self.handle_popstate())

    # -- Registration --

    def register(self, pattern: str, handler: Callable[..., Any]) -> Router:
        """Add a route. Registration order is the tie-break between patterns."""
        self._routes.append(Route(pattern=pattern, handler=handler))
        return self

    def set_not_found(self, handler: Callable[..., Any]) -> Router:
        """Install the handler used when nothing matches, replacing any previous one."""
        self._not_found = handler
        return self

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    @property
    def browser(self) -> Browser:
        return self._browser

    # -- Navigation --

    def navigate(self, path: str, push_history: bool = True) -> None:
        """Go to *path* as a new navigation (scrolls to top)."""
        if push_history:
            self._browser.push_state({"path": path}, "", path)
        self.resolve(path, True)

    def handle_popstate(self) -> None:
        """Re-resolve after back/forward; scroll position is left to the browser."""
        self.resolve(self._browser.location_path, False)

    def initialize(self) -> Router:
        """Resolve the browser's current location. Call once after registering routes."""
        self.resolve(self._browser.location_path, False)
        return self

    def get_current_route(self) -> str | None:
        """The last resolved normalized path, or ``None`` before any resolution."""
        return self._current_route

    # -- Resolution --

    def match(self, path: str) -> RouteMatch | None:
        """Find the route for an already-normalized *path* without side effects."""
        for route in self._routes:
            if route.pattern == path:
                return RouteMatch(route=route, params={})

        for route in self._routes:
            params = match_route(route.pattern, path)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    def resolve(self, path: str, is_new_navigation: bool) -> None:
        """Dispatch *path* to its handler and apply navigation side effects.

        Never raises for an unmatched path: falls back to the not-found
        handler, or logs when there is none and leaves the current route
        unchanged.
        """
        normalized = normalize_path(path)
        found = self.match(normalized)

        if found is not None:
            handler: Callable[..., Any] = found.route.handler
            params: Mapping[str, str] = found.params
        elif self._not_found is not None:
            handler = self._not_found
            params = {}
        else:
            logger.error("No route found for: %s", normalized)
            return

        self._current_route = normalized
        if is_new_navigation:
            self._browser.scroll_to_top()

        self._call(handler, params)
        self._announce(normalized)

    def _call(self, handler: Callable[..., Any], params: Mapping[str, str]) -> None:
        if _accepts_params(handler):
            result = handler(dict(params))
        else:
            result = handler()

        if inspect.iscoroutine(result):
            self._schedule(result)

    def _schedule(self, coro: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Async route handler %r dropped: no running event loop", coro)
            coro.close()
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_pending(self) -> None:
        """Wait for every scheduled async handler, re-raising the first failure.

        Handlers that schedule further navigations are waited for too.
        """
        while self._pending:
            await asyncio.gather(*self._pending)

    # -- Accessibility --

    def _announce(self, path: str) -> None:
        """Update the shared live region so screen readers hear the change."""
        self._live_region().text_content = f"Navigated to {describe_path(path)}"

    def _live_region(self) -> Element:
        document = self._browser.document
        region = document.get_element_by_id(ANNOUNCER_ID)
        if region is None:
            region = document.create_element("div")
            region.id = ANNOUNCER_ID
            region.class_name = "sr-only"
            region.set_attribute("role", "status")
            region.set_attribute("aria-live", "polite")
            region.set_attribute("aria-atomic", "true")
            document.body.append_child(region)
        return region


def _accepts_params(handler: Callable[..., Any]) -> bool:
    """True if *handler* can take the params mapping as a positional argument."""
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return True
    for param in signature.parameters.values():
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False
