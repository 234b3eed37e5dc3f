"""The client-routed portfolio site: content, pages, routes, theme."""

from folio.site.content import Breadcrumb, ContentLoader, SiteInfo, Song
from folio.site.pages import SitePages, create_site_environment
from folio.site.routes import page_routes
from folio.site.shell import RenderedPage, Site, bootstrap, render_location
from folio.site.theme import ThemeToggle

__all__ = [
    "Breadcrumb",
    "ContentLoader",
    "RenderedPage",
    "Site",
    "SiteInfo",
    "SitePages",
    "Song",
    "ThemeToggle",
    "bootstrap",
    "create_site_environment",
    "page_routes",
    "render_location",
]
