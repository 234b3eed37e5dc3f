"""The folio ASGI application.

Wires configuration, storage, templates and endpoints together once at
construction. There is no setup phase to freeze: everything the
request pipeline reads is built in ``__init__`` and never mutated.
"""

from __future__ import annotations

import logging

import httpx

from folio._internal.types import Receive, Scope, Send
from folio.cms.giphy import GiphyClient
from folio.cms.render import PageRenderer, create_environment
from folio.cms.storage import ImageBucket
from folio.cms.store import CanvasStore, EntryStore
from folio.config import SiteConfig
from folio.data import Database, migrate
from folio.http.response import Response
from folio.server.assets import SiteAssets
from folio.server.handler import handle_request
from folio.server.handlers import Endpoints, Services, register_endpoints
from folio.server.routes import RouteTable
from folio.site.content import ContentLoader
from folio.site.pages import create_site_environment
from folio.site.shell import render_location

logger = logging.getLogger("folio.server")


class SiteApp:
    """ASGI 3 application serving the site shell, assets, and the CMS.

    Usage::

        app = SiteApp(SiteConfig.from_env())
        app.run()                        # development server (pounce)

    Or hand ``app`` to any ASGI server. The lifespan protocol connects
    the database and applies pending migrations before the first
    request.
    """

    __slots__ = (
        "_assets",
        "_config",
        "_content",
        "_db",
        "_endpoints",
        "_renderer",
        "_routes",
        "_site_env",
    )

    def __init__(
        self,
        config: SiteConfig | None = None,
        *,
        giphy_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config = config or SiteConfig()
        self._db = Database(config.database_url, echo=config.debug)
        self._content = ContentLoader(config.content_file)

        self._renderer = renderer = PageRenderer(
            create_environment(config.debug), self._content.navigation
        )
        self._site_env = create_site_environment(config.debug)
        services = Services(
            config=config,
            entries=EntryStore(self._db),
            canvases=CanvasStore(self._db),
            images=ImageBucket(config.image_dir),
            giphy=GiphyClient(
                config.giphy_api_key,
                limit=config.giphy_limit,
                rating=config.giphy_rating,
                transport=giphy_transport,
            ),
            renderer=renderer,
        )

        self._routes = RouteTable()
        self._endpoints: Endpoints = register_endpoints(self._routes, services)
        self._assets = SiteAssets(config.public_dir, shell=self._render_shell)

    @property
    def config(self) -> SiteConfig:
        return self._config

    @property
    def db(self) -> Database:
        return self._db

    @property
    def content(self) -> ContentLoader:
        return self._content

    @property
    def routes(self) -> RouteTable:
        return self._routes

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            routes=self._routes,
            middleware=(self._assets,),
            debug=self._config.debug,
        )

    async def startup(self) -> None:
        """Connect the database and apply pending migrations."""
        await self._db.connect()
        result = await migrate(self._db, self._config.migrations_dir)
        logger.info("%s", result.summary)

    async def shutdown(self) -> None:
        await self._db.disconnect()

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Serving --

    async def _render_shell(self, path: str) -> Response:
        """Resolve *path* through the site router and wrap the result in the shell."""
        page = await render_location(path, self._config, self._content, self._site_env)
        html = self._renderer.shell(self._content.site, page)
        return Response(body=html, status=page.status)

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with pounce; reload is on in debug mode."""
        from folio.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self._config.host,
            port or self._config.port,
            reload=self._config.debug,
        )
