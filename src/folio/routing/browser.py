"""Browser port: the platform primitives the page router depends on.

The router never touches a real browser. It talks to anything shaped
like ``Browser``: a location, a history stack, a scroll position, a
document with a lookup-by-id and a click listener.

``HeadlessBrowser`` is the in-memory implementation used by the site
shell and by tests. Its history behaves like the platform's: pushing
truncates forward entries, and ``back()``/``forward()`` move the
location and fire popstate listeners without pushing anything.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol

type PopStateListener = Callable[[dict[str, Any] | None], None]
type ClickListener = Callable[["ClickEvent"], None]


class Element:
    """A minimal DOM element: tag, attributes, text, and children."""

    __slots__ = ("attributes", "children", "inner_html", "parent", "tag", "text_content")

    def __init__(self, tag: str, **attributes: str) -> None:
        self.tag = tag.lower()
        self.attributes: dict[str, str] = {
            name.removesuffix("_").replace("_", "-"): value for name, value in attributes.items()
        }
        self.text_content = ""
        self.inner_html = ""
        self.children: list[Element] = []
        self.parent: Element | None = None

    def __repr__(self) -> str:
        ident = f" id={self.id!r}" if self.id else ""
        return f"<Element {self.tag}{ident}>"

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @id.setter
    def id(self, value: str) -> None:
        self.attributes["id"] = value

    @property
    def class_name(self) -> str:
        return self.attributes.get("class", "")

    @class_name.setter
    def class_name(self, value: str) -> None:
        self.attributes["class"] = value

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def append_child(self, child: Element) -> Element:
        child.parent = self
        self.children.append(child)
        return child

    def iter(self) -> Iterator[Element]:
        """Yield this element and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.iter()

    def closest(self, tag: str) -> Element | None:
        """Nearest element with *tag*, starting at this one and walking up."""
        node: Element | None = self
        while node is not None:
            if node.tag == tag:
                return node
            node = node.parent
        return None


@dataclass(slots=True)
class ClickEvent:
    """A click dispatched through the document."""

    target: Element
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class Document:
    """A minimal document: an ``<html>`` root with a ``<body>``."""

    __slots__ = ("_click_listeners", "body", "document_element", "title")

    def __init__(self, title: str = "") -> None:
        self.title = title
        self.document_element = Element("html")
        self.body = self.document_element.append_child(Element("body"))
        self._click_listeners: list[ClickListener] = []

    def create_element(self, tag: str) -> Element:
        return Element(tag)

    def get_element_by_id(self, element_id: str) -> Element | None:
        for element in self.document_element.iter():
            if element.id == element_id:
                return element
        return None

    def add_click_listener(self, listener: ClickListener) -> None:
        self._click_listeners.append(listener)

    def click(self, target: Element) -> ClickEvent:
        """Dispatch a click on *target* to every delegated listener."""
        event = ClickEvent(target=target)
        for listener in self._click_listeners:
            listener(event)
        return event


class Browser(Protocol):
    """What the page router needs from its platform."""

    @property
    def location_path(self) -> str: ...

    @property
    def document(self) -> Document: ...

    def push_state(self, state: dict[str, Any], title: str, url: str) -> None: ...

    def scroll_to_top(self) -> None: ...

    def add_popstate_listener(self, listener: PopStateListener) -> None: ...


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One slot in the session history."""

    url: str
    state: dict[str, Any] | None = None


@dataclass(slots=True)
class HeadlessBrowser:
    """In-memory ``Browser`` with a real back/forward history stack.

    Usage::

        browser = HeadlessBrowser("/apps")
        router = Router(browser).register("/apps", render_apps).initialize()
        browser.back()  # fires popstate, router re-resolves
    """

    start_path: str = "/"
    document: Document = field(default_factory=Document)
    scroll_y: int = 0
    local_storage: dict[str, str] = field(default_factory=dict)
    color_scheme: str = "dark"
    history: list[HistoryEntry] = field(init=False)
    pushed: list[HistoryEntry] = field(init=False, default_factory=list)
    scroll_resets: int = field(init=False, default=0)
    _index: int = field(init=False, default=0)
    _popstate_listeners: list[PopStateListener] = field(init=False, default_factory=list)
    _scheme_listeners: list[Callable[[str], None]] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.history = [HistoryEntry(self.start_path)]

    # -- Browser protocol --

    @property
    def location_path(self) -> str:
        return self.history[self._index].url.split("?", 1)[0].split("#", 1)[0]

    def push_state(self, state: dict[str, Any], title: str, url: str) -> None:  # noqa: ARG002
        entry = HistoryEntry(url, dict(state))
        del self.history[self._index + 1 :]
        self.history.append(entry)
        self._index = len(self.history) - 1
        self.pushed.append(entry)

    def scroll_to_top(self) -> None:
        self.scroll_y = 0
        self.scroll_resets += 1

    def add_popstate_listener(self, listener: PopStateListener) -> None:
        self._popstate_listeners.append(listener)

    # -- Back/forward controls --

    def back(self) -> None:
        """Move one entry back and fire popstate. No-op at the start."""
        self._go(-1)

    def forward(self) -> None:
        """Move one entry forward and fire popstate. No-op at the end."""
        self._go(1)

    def _go(self, delta: int) -> None:
        target = self._index + delta
        if not 0 <= target < len(self.history):
            return
        self._index = target
        state = self.history[target].state
        for listener in self._popstate_listeners:
            listener(state)

    # -- Viewport and preferences --

    def scroll_to(self, y: int) -> None:
        self.scroll_y = y

    def add_color_scheme_listener(self, listener: Callable[[str], None]) -> None:
        self._scheme_listeners.append(listener)

    def set_color_scheme(self, scheme: str) -> None:
        """Simulate the operating system switching light/dark preference."""
        self.color_scheme = scheme
        for listener in self._scheme_listeners:
            listener(scheme)
