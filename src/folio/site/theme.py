"""Light/dark theme switching with a persisted preference.

The theme is a two-state cyclic machine. An explicit choice is stored
under ``chrislyons-theme``; until one exists the site starts dark and
follows the system color scheme when it changes.
"""

from __future__ import annotations

import logging

from folio.machine import StateMachine, Transition, create_cyclic_machine
from folio.routing.browser import HeadlessBrowser

logger = logging.getLogger("folio.machine")

STORAGE_KEY = "chrislyons-theme"
THEMES: tuple[str, ...] = ("light", "dark")
DEFAULT_THEME = "dark"


class ThemeToggle:
    """Apply and persist the site theme on a browser's document element.

    Usage::

        theme = ThemeToggle(browser)
        theme.toggle()   # light <-> dark, remembered
        theme.theme      # "light"
    """

    __slots__ = ("_browser", "_machine")

    def __init__(self, browser: HeadlessBrowser) -> None:
        self._browser = browser
        self._machine: StateMachine = create_cyclic_machine(
            THEMES, initial=self.resolve_initial_theme(), on_transition=self._on_transition
        )
        self.apply(self._machine.state)
        browser.add_color_scheme_listener(self._on_system_change)

    @property
    def theme(self) -> str:
        return self._machine.state

    @property
    def stored(self) -> str | None:
        """The persisted explicit choice, if it is a known theme."""
        value = self._browser.local_storage.get(STORAGE_KEY)
        return value if value in THEMES else None

    def resolve_initial_theme(self) -> str:
        return self.stored or DEFAULT_THEME

    def apply(self, theme: str) -> None:
        root = self._browser.document.document_element
        root.set_attribute("data-theme", theme)
        root.set_attribute("style", f"color-scheme: {theme}")
        classes = [c for c in root.class_name.split() if c != "dark"]
        if theme == "dark":
            classes.append("dark")
        root.class_name = " ".join(classes)

    def toggle(self) -> str:
        """Switch to the other theme and remember it."""
        self._machine.send("NEXT")
        self._browser.local_storage[STORAGE_KEY] = self.theme
        return self.theme

    def set_theme(self, theme: str) -> None:
        self._machine.send("GOTO", {"target": theme})

    def _on_transition(self, transition: Transition) -> None:
        logger.debug("Theme %s -> %s", transition.from_state, transition.to_state)
        self.apply(transition.to_state)

    def _on_system_change(self, scheme: str) -> None:
        if self.stored is not None:
            return
        target = "dark" if scheme == "dark" else "light"
        if target != self.theme:
            self.set_theme(target)
