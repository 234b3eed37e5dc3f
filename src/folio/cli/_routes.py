"""``folio routes``: print server endpoints and client-side page routes."""

from folio.config import SiteConfig
from folio.routing.browser import Document
from folio.site.content import ContentLoader
from folio.site.pages import SitePages
from folio.site.routes import page_routes


def _print_table(headers: tuple[str, str, str], rows: list[tuple[str, str, str]]) -> None:
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers)]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{}}"
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 4, 80))
    for row in rows:
        print(fmt.format(*row))


def run_routes(config: SiteConfig) -> None:
    from folio.server.app import SiteApp

    app = SiteApp(config)
    server_rows = [
        (
            ", ".join(sorted(route.methods)),
            route.pattern,
            route.name or getattr(route.handler, "__name__", str(route.handler)),
        )
        for route in app.routes.routes
    ]
    _print_table(("METHOD", "PATH", "HANDLER"), server_rows)
    print()

    pages = SitePages(Document(), ContentLoader(config.content_file))
    page_rows = [
        ("PAGE", pattern, getattr(handler, "__name__", str(handler)))
        for pattern, handler in page_routes(pages)
    ]
    page_rows.append(("PAGE", "*", "not_found"))
    _print_table(("KIND", "PATH", "HANDLER"), page_rows)
