"""Folio CLI: development server, migrations, and route listing.

Entry point registered as ``folio`` in ``pyproject.toml``::

    [project.scripts]
    folio = "folio.cli:main"

Configuration comes from ``FOLIO_*`` environment variables; flags
override it.
"""

import argparse
import logging
import sys
from dataclasses import replace

from folio.config import SiteConfig
from folio.errors import ConfigurationError


def _load_config(args: argparse.Namespace) -> SiteConfig:
    try:
        config = SiteConfig.from_env()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    overrides = {
        name: value
        for name in ("host", "port", "database_url")
        if (value := getattr(args, name, None)) is not None
    }
    if getattr(args, "debug", False):
        overrides["debug"] = True
    return replace(config, **overrides) if overrides else config


def _configure_logging(config: SiteConfig) -> None:
    level = "debug" if config.debug else config.log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``folio`` command."""
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Folio: portfolio site with a small blog CMS.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- folio serve ------------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start the development server")
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Reload on changes, echo SQL, show tracebacks",
    )

    # -- folio migrate ----------------------------------------------------
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending database migrations")
    migrate_parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL (default: FOLIO_DATABASE_URL or sqlite:///folio.db)",
    )

    # -- folio routes -----------------------------------------------------
    subparsers.add_parser("routes", help="List server endpoints and page routes")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    config = _load_config(args)
    _configure_logging(config)

    if args.command == "serve":
        from folio.cli._serve import run_serve

        run_serve(config)
    elif args.command == "migrate":
        from folio.cli._migrate import run_migrate

        run_migrate(config)
    elif args.command == "routes":
        from folio.cli._routes import run_routes

        run_routes(config)
