"""Page render functions for the client-routed site.

Each handler renders one kida template into the ``page-content``
element and updates the document title. Detail pages backed by a
Markdown or song file load it asynchronously, so their handler returns a
coroutine and the router fires it without waiting.
"""

from __future__ import annotations

import logging
from collections.abc import Coroutine, Mapping
from dataclasses import dataclass, fields
from datetime import UTC, datetime
from typing import Any

from kida import ChoiceLoader, Environment, PackageLoader
from kida.template import Markup

from folio.cms.render import NavLink
from folio.markdown import MarkdownParser, markdown_filter
from folio.routing.browser import Document
from folio.site.content import ContentLoader

logger = logging.getLogger("folio.content")

PAGE_CONTENT_ID = "page-content"
NAV_CONTAINER_ID = "nav-container"
FOOTER_CONTAINER_ID = "footer-container"

HOME_HEADING = "hey it's ChrisLyons.com"


@dataclass(frozen=True, slots=True)
class Card:
    title: str
    link: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class CrumbView:
    title: str
    path: str
    separator: bool = False


@dataclass(frozen=True, slots=True)
class ProjectLink:
    label: str
    url: str


@dataclass(frozen=True, slots=True)
class Feature:
    title: str
    summary: str
    detail: str = ""


@dataclass(frozen=True, slots=True)
class Question:
    question: str
    answer: str


@dataclass(frozen=True, slots=True)
class Album:
    title: str
    artist: str
    embed: str
    url: str


@dataclass(frozen=True, slots=True)
class SongView:
    anchor: str
    title: str
    lyrics_html: Markup | None


def _records[T](page: Mapping[str, Any], key: str, view: type[T]) -> list[T]:
    """Build *view* objects from the list of mappings under *key*."""
    names = {field.name for field in fields(view)}
    return [
        view(**{name: str(value) for name, value in record.items() if name in names})
        for record in page.get(key, ())
        if isinstance(record, Mapping)
    ]


def create_site_environment(debug: bool = False) -> Environment:
    """Site templates first, then the CMS templates for the shared nav."""
    env = Environment(
        loader=ChoiceLoader(
            [
                PackageLoader("folio.site", "templates"),
                PackageLoader("folio.cms", "templates"),
            ]
        ),
        autoescape=True,
        auto_reload=debug,
    )
    env.update_filters({"markdown": markdown_filter})
    return env


class SitePages:
    """Render functions bound to one document and one content file.

    Usage::

        pages = SitePages(browser.document, ContentLoader(config.content_file))
        router.register("/", pages.home)
        router.register("/apps/:slug", pages.app_detail)
        router.set_not_found(pages.not_found)
    """

    __slots__ = ("_content", "_document", "_env", "_status")

    def __init__(
        self,
        document: Document,
        content: ContentLoader,
        env: Environment | None = None,
    ) -> None:
        self._document = document
        self._content = content
        self._env = env or create_site_environment()
        self._status = 200

    @property
    def content(self) -> ContentLoader:
        return self._content

    # -- Output --

    def _render(self, name: str, **context: Any) -> str:
        return self._env.get_template(name).render(context)

    @property
    def status(self) -> int:
        """HTTP status of the last page written: 404 after the not-found page, else 200."""
        return self._status

    def _write(self, html: str, page_title: str | None, status: int = 200) -> None:
        self._status = status
        self._document.title = self._content.document_title(page_title)
        target = self._document.get_element_by_id(PAGE_CONTENT_ID)
        if target is None:
            logger.error("No #%s element to render into", PAGE_CONTENT_ID)
            return
        target.inner_html = html

    def render_chrome(self, year: int | None = None) -> None:
        """Fill the navigation and footer containers once at startup."""
        nav = self._document.get_element_by_id(NAV_CONTAINER_ID)
        if nav is not None:
            nav.inner_html = self._render(
                "_nav.html",
                navigation=[NavLink.from_mapping(item) for item in self._content.navigation],
            )
        footer = self._document.get_element_by_id(FOOTER_CONTAINER_ID)
        if footer is not None:
            footer.inner_html = self._render(
                "footer.html",
                year=year or datetime.now(UTC).year,
                author=self._content.site.author,
            )

    # -- Pages --

    def home(self) -> None:
        self._write(self._render("home.html", heading=HOME_HEADING), None)

    def apps(self) -> None:
        self.landing("apps")

    def ideas(self) -> None:
        self.landing("ideas")

    def sounds(self) -> None:
        self.landing("sounds")

    def landing(self, section_id: str) -> None:
        """A section index: one card per navigation child."""
        page = self._content.get_page(section_id) or {}
        item = self._content.find_nav_item(section_id) or {}
        title = str(page.get("title") or item.get("title") or section_id.title())

        cards = []
        for child in item.get("children", ()):
            child_page = self._content.get_page(str(child.get("id", ""))) or {}
            cards.append(
                Card(
                    title=str(child.get("title", "")),
                    link=str(child.get("path", "")),
                    description=str(child_page.get("meta", {}).get("description", "")),
                )
            )

        html = self._render(
            "landing.html",
            title=title,
            subtitle=page.get("subtitle", ""),
            description=page.get("meta", {}).get("description", ""),
            cards=cards,
            empty_message="No content currently available.",
        )
        self._write(html, title)

    def connect(self) -> None:
        page = self._content.get_page("connect") or {}
        html = self._render(
            "connect.html",
            email=self._content.site.email,
            description=page.get("meta", {}).get("description", ""),
        )
        self._write(html, "Connect")

    def not_found(self) -> None:
        self._write(self._render("not_found.html"), "Page Not Found", status=404)

    # -- Detail pages --

    def app_detail(self, params: Mapping[str, str]) -> Coroutine[Any, Any, None] | None:
        return self.detail("apps", params.get("slug", ""))

    def idea_detail(self, params: Mapping[str, str]) -> Coroutine[Any, Any, None] | None:
        return self.detail("ideas", params.get("slug", ""))

    def sound_detail(self, params: Mapping[str, str]) -> Coroutine[Any, Any, None] | None:
        return self.detail("sounds", params.get("slug", ""))

    def detail(self, section_id: str, slug: str) -> Coroutine[Any, Any, None] | None:
        """Render ``/<section>/<slug>``.

        Unknown slugs get the 404 page. Placeholder pages get the
        "coming soon" page. Pages with a ``markdown`` or ``songs`` file
        return a coroutine that loads and renders it. Anything else is a
        project page built from the record's links, features, stack,
        FAQ and album embeds.
        """
        path = f"/{section_id}/{slug}"
        page = self._content.get_page_by_path(path)
        if page is None:
            self.not_found()
            return None

        title = str(page.get("title", slug))
        description = str(page.get("meta", {}).get("description", ""))
        if page.get("placeholder"):
            html = self._render("placeholder.html", title=title, description=description)
            self._write(html, title)
            return None

        markdown_path = page.get("markdown")
        if markdown_path:
            return self._render_markdown(section_id, path, page, str(markdown_path))

        songs_path = page.get("songs")
        if songs_path:
            return self._render_songs(section_id, path, page, str(songs_path))

        self._write(self._detail_html(section_id, path, page, self._project_html(page)), title)
        return None

    def _project_html(self, page: Mapping[str, Any]) -> Markup:
        """Feature cards, stack, FAQ and album embeds listed in the page record."""
        return Markup(
            self._render(
                "_project.html",
                features=_records(page, "features", Feature),
                stack=[str(item) for item in page.get("stack", ())],
                faq=_records(page, "faq", Question),
                albums=_records(page, "albums", Album),
            )
        )

    async def _render_markdown(
        self, section_id: str, path: str, page: Mapping[str, Any], markdown_path: str
    ) -> None:
        source = await self._content.load_markdown(markdown_path)
        _frontmatter, body = MarkdownParser.extract_frontmatter(source)
        body_html = Markup(
            f'<article class="prose max-w-none">{MarkdownParser.parse(body)}</article>'
        )
        self._write(
            self._detail_html(section_id, path, page, body_html),
            str(page.get("title", "")),
        )

    async def _render_songs(
        self, section_id: str, path: str, page: Mapping[str, Any], songs_path: str
    ) -> None:
        songs = [
            SongView(
                anchor=f"song-{index}",
                title=song.title,
                lyrics_html=Markup(song.lyrics) if song.lyrics else None,
            )
            for index, song in enumerate(await self._content.load_songs(songs_path))
        ]
        body_html = Markup(self._render("_lyrics.html", songs=songs))
        self._write(
            self._detail_html(section_id, path, page, body_html),
            str(page.get("title", "")),
        )

    def _detail_html(
        self, section_id: str, path: str, page: Mapping[str, Any], body_html: Markup
    ) -> str:
        section = self._content.find_nav_item(section_id) or {}
        crumbs = [
            CrumbView(title=crumb.title, path=crumb.path, separator=i > 0)
            for i, crumb in enumerate(self._content.breadcrumbs(path))
        ]
        return self._render(
            "page.html",
            title=page.get("title", ""),
            subtitle=page.get("subtitle", ""),
            description=page.get("meta", {}).get("description", ""),
            links=_records(page, "links", ProjectLink),
            breadcrumbs=crumbs,
            body_html=body_html,
            back_path=section.get("path", "/"),
            back_title=section.get("title", "home"),
        )
