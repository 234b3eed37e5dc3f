"""Site configuration.

SiteConfig is a frozen dataclass: immutable after creation, with no
string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path

from folio.errors import ConfigurationError

_PACKAGE_DIR = Path(__file__).parent

_ENV_PREFIX = "FOLIO_"


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteConfig(debug=True, port=3000, giphy_api_key="...")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Storage
    database_url: str = "sqlite:///folio.db"
    migrations_dir: str | Path = _PACKAGE_DIR / "data" / "migrations"
    image_dir: str | Path = "images"
    max_upload_size: int = 10 * 1024 * 1024  # 10 MB

    # Static site
    public_dir: str | Path = "public"
    content_file: str | Path = _PACKAGE_DIR / "site" / "content.json"

    # Client-side routing: paths under these prefixes are rendered by the
    # server and reached by full page navigation.
    passthrough_prefixes: tuple[str, ...] = ("/blog", "/admin")

    # Blog
    blog_page_size: int = 20
    feed_size: int = 50

    # GIF search proxy
    giphy_api_key: str = ""
    giphy_limit: int = 12
    giphy_rating: str = "g"

    # Logging
    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SiteConfig:
        """Build a config from ``FOLIO_*`` environment variables.

        ``FOLIO_PORT=3000`` sets ``port``, ``FOLIO_DEBUG=1`` sets ``debug``,
        ``FOLIO_PASSTHROUGH_PREFIXES=/blog,/admin`` sets the tuple field.
        Unknown variables are ignored.

        Raises ``ConfigurationError`` when a value cannot be converted.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(f"{_ENV_PREFIX}{f.name.upper()}")
            if raw is None:
                continue
            overrides[f.name] = _convert(f.name, raw, type(getattr(_DEFAULTS, f.name)))
        return cls(**overrides)


def _convert(name: str, raw: str, target: type) -> object:
    """Convert an environment string to the type of the field's default."""
    if target is bool:
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off", ""):
            return False
        msg = f"{_ENV_PREFIX}{name.upper()} must be a boolean, got {raw!r}"
        raise ConfigurationError(msg)
    if target is int:
        try:
            return int(raw)
        except ValueError:
            msg = f"{_ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}"
            raise ConfigurationError(msg) from None
    if target is tuple:
        return tuple(part.strip() for part in raw.split(",") if part.strip())
    return raw


_DEFAULTS = SiteConfig()
