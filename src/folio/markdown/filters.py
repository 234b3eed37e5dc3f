"""Template filter for Markdown rendering.

Converted HTML is marked safe so kida's autoescape leaves it intact.
"""

from typing import Any

from kida.template import Markup

from folio.markdown.parser import MarkdownParser


def markdown_filter(source: Any) -> Markup:
    """Render *source* as Markdown: ``{{ body | markdown }}``."""
    return Markup(MarkdownParser.parse(source))
