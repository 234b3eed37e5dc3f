"""Path normalization and ``:param`` pattern matching.

Patterns are ``/``-delimited templates. A segment starting with ``:``
binds a named parameter; every other segment must match literally::

    match_route("/blog/:slug", "/blog/hello-world")  -> {"slug": "hello-world"}
    match_route("/a/:x/:y", "/a/1")                  -> None
"""

from folio.routing.route import PathSegment


def normalize_path(path: str) -> str:
    """Strip a single trailing slash, leaving the root path alone.

    ``"/about/"`` -> ``"/about"``, ``"/"`` -> ``"/"``.
    """
    if path == "/":
        return path
    return path.removesuffix("/")


def split_path(path: str) -> list[str]:
    """Split on ``/`` and drop empty segments."""
    return [part for part in path.split("/") if part]


def parse_pattern(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/blog"        -> [PathSegment("blog")]
        "/blog/:slug"  -> [PathSegment("blog"), PathSegment(":slug", is_param=True, ...)]
        "/"            -> []
    """
    segments: list[PathSegment] = []
    for part in split_path(pattern):
        if part.startswith(":"):
            segments.append(PathSegment(value=part, is_param=True, param_name=part[1:]))
        else:
            segments.append(PathSegment(value=part))
    return segments


def match_route(pattern: str, path: str) -> dict[str, str] | None:
    """Match *path* against *pattern* segment by segment.

    Returns the captured parameters (empty for a literal pattern), or
    ``None`` when segment counts differ or a literal segment disagrees.
    No validation of the pattern is performed; a malformed pattern
    simply never matches.
    """
    pattern_parts = split_path(pattern)
    path_parts = split_path(path)

    if len(pattern_parts) != len(path_parts):
        return None

    params: dict[str, str] = {}
    for expected, actual in zip(pattern_parts, path_parts, strict=True):
        if expected.startswith(":"):
            params[expected[1:]] = actual
        elif expected != actual:
            return None
    return params


def describe_path(path: str) -> str:
    """Human-readable destination for screen reader announcements.

    The root path reads as ``"home page"``; any other path has each
    ``/`` replaced by a space (``"/apps/hotbox"`` -> ``" apps hotbox"``).
    """
    if path == "/":
        return "home page"
    return path.replace("/", " ")
