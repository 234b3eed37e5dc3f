"""Development server.

Starts a pounce ASGI server with the live ``SiteApp`` object. pounce
ships in the optional ``server`` extra, so it is imported on use.
"""

from __future__ import annotations


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    reload_include: tuple[str, ...] = (".html", ".css", ".js", ".md", ".json"),
) -> None:
    """Start a single-worker pounce server for *app*.

    Args:
        app: ASGI callable (a ``SiteApp``).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes.
        reload_include: Extra file extensions to watch when reload is on.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=reload_include,
    )
    Server(config, app).run()
