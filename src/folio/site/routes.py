"""Page routes of the client-routed site.

Order matters only between parameterized patterns; exact patterns
always win. Section detail pages share one ``:slug`` route each.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from folio.site.pages import SitePages


def page_routes(pages: SitePages) -> list[tuple[str, Callable[..., Any]]]:
    """``(pattern, handler)`` pairs in registration order."""
    return [
        ("/", pages.home),
        ("/apps", pages.apps),
        ("/apps/:slug", pages.app_detail),
        ("/ideas", pages.ideas),
        ("/ideas/:slug", pages.idea_detail),
        ("/sounds", pages.sounds),
        ("/sounds/:slug", pages.sound_detail),
        ("/connect", pages.connect),
    ]

