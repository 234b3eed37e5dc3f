"""Markdown conversion for site content.

Basic usage::

    from folio.markdown import MarkdownParser

    html = MarkdownParser.parse("# Hello")

Then in templates (the filter is registered on folio's kida environment)::

    {{ page.body | markdown }}
"""

from folio.markdown.filters import markdown_filter
from folio.markdown.parser import MarkdownParser, TocEntry

__all__ = [
    "MarkdownParser",
    "TocEntry",
    "markdown_filter",
]
