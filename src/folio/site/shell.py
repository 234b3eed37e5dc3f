"""Site bootstrap: one router, its page routes, link interception.

Nothing here is global. ``bootstrap()`` builds the pieces, wires them
together, resolves the current location, and returns them so the
caller (or a test) holds every reference. ``render_location()`` does
the same for one request path and hands back the rendered containers
for the server to embed in the shell document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kida import Environment

from folio.config import SiteConfig
from folio.routing.browser import Element, HeadlessBrowser
from folio.routing.links import LinkInterceptor
from folio.routing.router import Router
from folio.site.content import ContentLoader
from folio.site.pages import (
    FOOTER_CONTAINER_ID,
    NAV_CONTAINER_ID,
    PAGE_CONTENT_ID,
    SitePages,
)
from folio.site.routes import page_routes
from folio.site.theme import ThemeToggle

logger = logging.getLogger("folio.router")


@dataclass(frozen=True, slots=True)
class Site:
    """Everything ``bootstrap()`` wired together."""

    browser: HeadlessBrowser
    router: Router
    pages: SitePages
    links: LinkInterceptor
    theme: ThemeToggle


def mount_containers(browser: HeadlessBrowser) -> None:
    """Create the shell's nav, content and footer elements if missing."""
    document = browser.document
    for element_id, tag in (
        (NAV_CONTAINER_ID, "nav"),
        (PAGE_CONTENT_ID, "div"),
        (FOOTER_CONTAINER_ID, "footer"),
    ):
        if document.get_element_by_id(element_id) is None:
            document.body.append_child(Element(tag, id=element_id))


def bootstrap(
    browser: HeadlessBrowser,
    config: SiteConfig | None = None,
    content: ContentLoader | None = None,
    env: Environment | None = None,
) -> Site:
    """Build and start the client-routed site on *browser*.

    Usage::

        site = bootstrap(HeadlessBrowser("/apps"))
        site.router.get_current_route()  # "/apps"
        site.router.navigate("/connect")
    """
    config = config or SiteConfig()
    content = content or ContentLoader(config.content_file)

    mount_containers(browser)
    pages = SitePages(browser.document, content, env)
    pages.render_chrome()

    router = Router(browser)
    for pattern, handler in page_routes(pages):
        router.register(pattern, handler)
    router.set_not_found(pages.not_found)

    links = LinkInterceptor(router, config.passthrough_prefixes).attach(browser.document)
    theme = ThemeToggle(browser)

    router.initialize()
    logger.debug("Site started at %s", browser.location_path)
    return Site(browser=browser, router=router, pages=pages, links=links, theme=theme)


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """The filled-in containers of one resolved location."""

    status: int
    title: str
    html_class: str
    nav_html: str
    page_html: str
    footer_html: str


async def render_location(
    path: str,
    config: SiteConfig | None = None,
    content: ContentLoader | None = None,
    env: Environment | None = None,
) -> RenderedPage:
    """Resolve *path* on a fresh headless browser and collect what it rendered.

    Async detail pages are awaited, so the result always holds the
    finished page. ``status`` is 404 when the not-found page rendered.

    Usage::

        page = await render_location("/ideas/27-suppositions")
        page.title       # "27 Suppositions - Chris Lyons - ..."
        page.page_html   # breadcrumbs, heading, article
    """
    site = bootstrap(HeadlessBrowser(path), config, content, env)
    await site.router.wait_pending()

    document = site.browser.document

    def inner_html(element_id: str) -> str:
        element = document.get_element_by_id(element_id)
        return element.inner_html if element is not None else ""

    return RenderedPage(
        status=site.pages.status,
        title=document.title,
        html_class=document.document_element.class_name,
        nav_html=inner_html(NAV_CONTAINER_ID),
        page_html=inner_html(PAGE_CONTENT_ID),
        footer_html=inner_html(FOOTER_CONTAINER_ID),
    )
