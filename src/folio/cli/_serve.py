"""``folio serve``: run the site under pounce."""

import sys

from folio.config import SiteConfig


def run_serve(config: SiteConfig) -> None:
    from folio.server.app import SiteApp

    try:
        import pounce  # noqa: F401
    except ImportError:
        print(
            "Error: the development server needs pounce. "
            "Install it with: pip install 'folio[server]'",
            file=sys.stderr,
        )
        raise SystemExit(1) from None

    SiteApp(config).run()
