"""Server-rendered CMS pages: blog, admin, canvas creator.

Templates live in ``folio/cms/templates`` and render through one kida
Environment. Entry-level decisions (relative times, fonts, defaults
per entry type) are made here so the templates only lay out values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from kida import Environment, PackageLoader
from kida.template import Markup

from folio.cms.feed import parse_timestamp
from folio.cms.models import Entry
from folio.markdown import markdown_filter

logger = logging.getLogger("folio.cms")

DEFAULT_FONT_URL = "https://fonts.googleapis.com/css2?family=Inter:wght@400;600&display=swap"

# Fonts offered by the editors' font pickers.
FONTS: tuple[tuple[str, str], ...] = (
    ("Inter", "sans-serif"),
    ("Work Sans", "sans-serif"),
    ("DM Sans", "sans-serif"),
    ("Playfair Display", "serif"),
    ("Lora", "serif"),
    ("Merriweather", "serif"),
    ("Bebas Neue", "display"),
    ("Righteous", "display"),
    ("Caveat", "handwriting"),
    ("Pacifico", "handwriting"),
    ("Permanent Marker", "handwriting"),
    ("Space Mono", "monospace"),
    ("JetBrains Mono", "monospace"),
)


def extract_fonts(entries: Iterable[Entry]) -> list[str]:
    """Unique ``metadata.font`` values in first-seen order."""
    seen: dict[str, None] = {}
    for entry in entries:
        font = entry.metadata_data.get("font")
        if font:
            seen[str(font)] = None
    return list(seen)


@dataclass(frozen=True, slots=True)
class FontOption:
    name: str
    category: str


def build_font_url(fonts: Sequence[str]) -> str:
    """One Google Fonts stylesheet URL for *fonts*; Inter when empty."""
    if not fonts:
        return DEFAULT_FONT_URL
    families = "&".join(f"family={font.replace(' ', '+')}:wght@400;700" for font in fonts)
    return f"https://fonts.googleapis.com/css2?{families}&display=swap"


def format_relative_time(timestamp: str, now: datetime | None = None) -> str:
    """``just now``, ``N minutes ago``, ... then ``Mon D, YYYY`` after a week."""
    then = parse_timestamp(timestamp)
    now = now or datetime.now(UTC)
    seconds = int((now - then).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return "just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if days < 7:
        return f"{days} day{'s' if days > 1 else ''} ago"
    return f"{then:%b} {then.day}, {then.year}"


@dataclass(frozen=True, slots=True)
class EntryView:
    """Everything ``_entry.html`` needs for one entry."""

    id: int
    type: str
    created_at: str
    relative_time: str
    published: bool
    text: str = ""
    url: str = ""
    alt: str = ""
    caption: str = ""
    title: str = ""
    author: str = ""
    font: str = ""
    font_size: str = ""
    color: str = ""


def entry_view(entry: Entry, now: datetime | None = None) -> EntryView:
    content = entry.content_data
    metadata = entry.metadata_data

    def text_of(key: str) -> str:
        value = content.get(key)
        return "" if value is None else str(value)

    default_font = "Georgia" if entry.type == "quote" else "Inter"
    return EntryView(
        id=entry.id,
        type=entry.type,
        created_at=entry.created_at,
        relative_time=format_relative_time(entry.created_at, now),
        published=entry.is_published,
        text=text_of("text"),
        url=text_of("url"),
        alt=text_of("alt"),
        caption=text_of("caption"),
        title=text_of("title"),
        author=text_of("author"),
        font=str(content.get("font") or metadata.get("font") or default_font),
        font_size=str(content.get("fontSize") or "18px"),
        color=str(content.get("color") or "#333333"),
    )


@dataclass(frozen=True, slots=True)
class NavLink:
    """A menu item as the nav template sees it."""

    title: str
    path: str
    id: str = ""
    children: tuple[NavLink, ...] = ()

    @classmethod
    def from_mapping(cls, item: Mapping[str, Any]) -> NavLink:
        return cls(
            title=str(item.get("title", "")),
            path=str(item.get("path", "")),
            id=str(item.get("id", "")),
            children=tuple(cls.from_mapping(child) for child in item.get("children", ())),
        )


def create_environment(debug: bool = False) -> Environment:
    """The kida Environment shared by CMS and site-shell templates."""
    env = Environment(
        loader=PackageLoader("folio.cms", "templates"),
        autoescape=True,
        auto_reload=debug,
    )
    env.update_filters(
        {
            "markdown": markdown_filter,
            "relative_time": format_relative_time,
        }
    )
    return env


class PageRenderer:
    """Render the CMS and shell pages from one environment.

    ``navigation`` is the site's top-level menu (the ``navigation``
    list of ``content.json``), shown as the floating nav.
    """

    __slots__ = ("_env", "_navigation")

    def __init__(self, env: Environment, navigation: Sequence[Mapping[str, Any]] = ()) -> None:
        self._env = env
        self._navigation = tuple(NavLink.from_mapping(item) for item in navigation)

    @property
    def env(self) -> Environment:
        return self._env

    def render(self, name: str, **context: Any) -> str:
        nav = self._env.get_template("_nav.html").render({"navigation": self._navigation})
        return self._env.get_template(name).render({"nav_html": Markup(nav), **context})

    def render_entries(self, entries: Iterable[Entry], *, admin: bool) -> Markup:
        """Each entry through ``_entry.html``, joined."""
        template = self._env.get_template("_entry.html")
        return Markup(
            "\n".join(template.render({"entry": entry_view(e), "admin": admin}) for e in entries)
        )

    def blog(self, entries: Sequence[Entry]) -> str:
        return self.render(
            "blog.html",
            font_url=build_font_url(extract_fonts(entries)),
            entries_html=self.render_entries(entries, admin=False),
            empty=not entries,
            current_path="/blog",
        )

    def admin(self, entries: Sequence[Entry]) -> str:
        return self.render(
            "admin.html",
            font_url=build_font_url(extract_fonts(entries)),
            entries_html=self.render_entries(entries, admin=True),
            empty=not entries,
            current_path="/admin",
        )

    def canvas_creator(self) -> str:
        return self.render(
            "canvas.html",
            fonts=[FontOption(name, category) for name, category in FONTS],
        )

    def shell(self, site: Any, page: Any) -> str:
        """The site document for an extensionless path, with *page*'s containers filled in."""
        return self.render(
            "shell.html",
            site=site,
            title=page.title or site.title,
            html_class=page.html_class,
            page_html=Markup(page.page_html),
            footer_html=Markup(page.footer_html),
            nav_html=Markup(page.nav_html),
        )
