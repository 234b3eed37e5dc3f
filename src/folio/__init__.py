"""Folio: a portfolio site with client-style page routing and a small blog CMS.

Page routing::

    from folio import HeadlessBrowser, Router

    browser = HeadlessBrowser("/")
    router = Router(browser)
    router.register("/", render_home).register("/blog/:slug", render_post)
    router.set_not_found(render_404).initialize()
    router.navigate("/blog/hello-world")

Serving the site and CMS::

    from folio import SiteApp, SiteConfig

    app = SiteApp(SiteConfig.from_env())
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "BadRequest",
    "ConfigurationError",
    "FolioError",
    "HTTPError",
    "HeadlessBrowser",
    "LinkInterceptor",
    "MarkdownParser",
    "MethodNotAllowed",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "Router",
    "SiteApp",
    "SiteConfig",
    "StateMachine",
    "bootstrap",
    "create_cyclic_machine",
    "match_route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import folio`` fast while providing a clean top-level API.
    """
    if name in ("Router", "HeadlessBrowser", "LinkInterceptor", "match_route"):
        from folio import routing as _routing

        return getattr(_routing, name)

    if name == "SiteApp":
        from folio.server.app import SiteApp

        return SiteApp

    if name == "SiteConfig":
        from folio.config import SiteConfig

        return SiteConfig

    if name == "bootstrap":
        from folio.site.shell import bootstrap

        return bootstrap

    if name in ("StateMachine", "create_cyclic_machine"):
        from folio import machine as _machine

        return getattr(_machine, name)

    if name == "MarkdownParser":
        from folio.markdown import MarkdownParser

        return MarkdownParser

    if name == "Request":
        from folio.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from folio.http import response as _resp

        return getattr(_resp, name)

    if name in (
        "BadRequest",
        "ConfigurationError",
        "FolioError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
    ):
        from folio import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
