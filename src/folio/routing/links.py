"""Delegated link interception for client-side navigation.

One click listener on the document catches root-relative anchor clicks
and hands them to ``Router.navigate``. Paths under the passthrough
prefixes are server-rendered and left alone so the browser performs a
full page load.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from folio.routing.browser import ClickEvent, Document
from folio.routing.router import Router

logger = logging.getLogger("folio.router")


class LinkInterceptor:
    """Route same-origin link clicks through the page router.

    Usage::

        interceptor = LinkInterceptor(router, passthrough_prefixes=("/blog", "/admin"))
        interceptor.attach(browser.document)
    """

    __slots__ = ("_prefixes", "_router")

    def __init__(self, router: Router, passthrough_prefixes: Iterable[str] = ()) -> None:
        self._router = router
        self._prefixes = tuple(passthrough_prefixes)

    @property
    def passthrough_prefixes(self) -> tuple[str, ...]:
        return self._prefixes

    def attach(self, document: Document) -> LinkInterceptor:
        document.add_click_listener(self.handle_click)
        return self

    def should_intercept(self, href: str | None) -> bool:
        """True for root-relative hrefs outside the passthrough prefixes."""
        if not href or not href.startswith("/") or href.startswith("//"):
            return False
        return not any(href.startswith(prefix) for prefix in self._prefixes)

    def handle_click(self, event: ClickEvent) -> None:
        link = event.target.closest("a")
        if link is None:
            return
        href = link.get_attribute("href")
        if href is None or not self.should_intercept(href):
            return
        event.prevent_default()
        logger.debug("Intercepted link to %s", href)
        self._router.navigate(href)
