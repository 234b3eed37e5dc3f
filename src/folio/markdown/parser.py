"""Regex-based Markdown to HTML converter.

No AST, no external parser: a fixed sequence of substitutions covering
what the site's content files use (headers, emphasis, links, images,
code, lists, quotes, tables, paragraphs). Output carries the site's
utility classes so converted content matches hand-written pages.

Input is trusted site content and is not HTML-escaped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_HEADERS = [
    (re.compile(rf"^{'#' * level}\s+(.+)$", re.M), f"<h{level}>\\1</h{level}>")
    for level in range(6, 0, -1)
]

_HR = re.compile(r"^(?:---|\*\*\*)$", re.M)

_EMPHASIS = [
    (re.compile(r"\*\*\*(.+?)\*\*\*"), r"<strong><em>\1</em></strong>"),
    (re.compile(r"___(.+?)___"), r"<strong><em>\1</em></strong>"),
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"__(.+?)__"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.+?)\*"), r"<em>\1</em>"),
    (re.compile(r"_(.+?)_"), r"<em>\1</em>"),
]

_IMAGE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_CODE_BLOCK = re.compile(r"```([^`]+)```")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_BLOCKQUOTE = re.compile(r"^>\s+(.+)$", re.M)

_UNORDERED_LIST = re.compile(r"(?:^|\n)((?:^[-*+]\s+.+\n?)+)", re.M)
_ORDERED_LIST = re.compile(r"(?:^|\n)((?:^\d+\.\s+.+\n?)+)", re.M)
_UNORDERED_ITEM = re.compile(r"^[-*+]\s+")
_ORDERED_ITEM = re.compile(r"^\d+\.\s+")

_TABLE = re.compile(r"(\|.+\|)\n(\|[-:\s|]+\|)\n((?:\|.+\|\n?)+)")
_PARAGRAPH_BREAK = re.compile(r"\n\n+")

_FRONTMATTER = re.compile(r"^---\n([\s\S]+?)\n---\n([\s\S]*)$")
_TOC_HEADER = re.compile(r"^(#{1,6})\s+(.+)$", re.M)
_SLUG_BREAK = re.compile(r"[^\w]+")


@dataclass(frozen=True, slots=True)
class TocEntry:
    """One header in a generated table of contents."""

    level: int
    text: str
    id: str


class MarkdownParser:
    """Convert site Markdown to HTML.

    Usage::

        html = MarkdownParser.parse("# Title\\n\\nSome **bold** text.")
        meta, body = MarkdownParser.extract_frontmatter(source)
        toc = MarkdownParser.generate_toc(source)
    """

    @classmethod
    def parse(cls, markdown: Any) -> str:
        """Convert *markdown* to HTML. Empty or non-string input yields ``""``."""
        if not markdown or not isinstance(markdown, str):
            return ""

        html = markdown
        for pattern, replacement in _HEADERS:
            html = pattern.sub(replacement, html)

        html = _HR.sub("<hr>", html)

        for pattern, replacement in _EMPHASIS:
            html = pattern.sub(replacement, html)

        # Images first: the link pattern would otherwise consume ![alt](src).
        html = _IMAGE.sub(
            r'<img src="\2" alt="\1" class="max-w-full h-auto rounded-lg shadow-md my-4">', html
        )
        html = _LINK.sub(r'<a href="\2" class="link">\1</a>', html)

        html = _CODE_BLOCK.sub(
            r'<pre class="bg-gray-100 p-4 rounded-lg overflow-x-auto my-4"><code>\1</code></pre>',
            html,
        )
        html = _INLINE_CODE.sub(
            r'<code class="bg-gray-100 px-2 py-1 rounded text-sm font-mono">\1</code>', html
        )

        html = cls.parse_lists(html)
        html = _BLOCKQUOTE.sub(
            r'<blockquote class="border-l-4 border-gray-300 pl-4 italic my-4">\1</blockquote>',
            html,
        )
        html = cls.parse_tables(html)
        return cls.parse_paragraphs(html)

    @staticmethod
    def parse_lists(html: str) -> str:
        """Turn runs of ``-``/``*``/``+`` and ``1.`` lines into ``<ul>``/``<ol>``."""

        def unordered(match: re.Match[str]) -> str:
            items = "\n".join(
                f'<li class="ml-4">{_UNORDERED_ITEM.sub("", line)}</li>'
                for line in match.group(0).strip().split("\n")
            )
            return f'<ul class="list-disc list-inside my-4 space-y-2">\n{items}\n</ul>'

        def ordered(match: re.Match[str]) -> str:
            items = "\n".join(
                f'<li class="ml-4">{_ORDERED_ITEM.sub("", line)}</li>'
                for line in match.group(0).strip().split("\n")
            )
            return f'<ol class="list-decimal list-inside my-4 space-y-2">\n{items}\n</ol>'

        html = _UNORDERED_LIST.sub(unordered, html)
        return _ORDERED_LIST.sub(ordered, html)

    @staticmethod
    def parse_paragraphs(html: str) -> str:
        """Wrap blank-line separated blocks in ``<p>`` unless they are already HTML."""
        blocks: list[str] = []
        for block in _PARAGRAPH_BREAK.split(html):
            block = block.strip()
            if not block:
                blocks.append("")
            elif block.startswith("<"):
                blocks.append(block)
            else:
                blocks.append(f'<p class="my-4 leading-relaxed">{block}</p>')
        return "\n".join(blocks)

    @staticmethod
    def parse_tables(html: str) -> str:
        """Convert pipe tables (header, separator, rows) to responsive ``<table>`` markup."""

        def table(match: re.Match[str]) -> str:
            header, _separator, rows = match.groups()
            header_cells = "".join(
                f'<th class="px-4 py-2 text-left font-semibold border-b">{cell.strip()}</th>'
                for cell in header.split("|")
                if cell.strip()
            )
            row_html = "\n".join(
                "<tr>"
                + "".join(
                    f'<td class="px-4 py-2 border-b">{cell.strip()}</td>'
                    for cell in row.split("|")
                    if cell.strip()
                )
                + "</tr>"
                for row in rows.strip().split("\n")
            )
            return (
                '<div class="overflow-x-auto my-6">'
                '<table class="min-w-full border-collapse">'
                f'<thead class="bg-gray-50"><tr>{header_cells}</tr></thead>'
                f"<tbody>{row_html}</tbody>"
                "</table></div>"
            )

        return _TABLE.sub(table, html)

    @staticmethod
    def extract_frontmatter(markdown: str) -> tuple[dict[str, str], str]:
        """Split ``---`` delimited ``key: value`` frontmatter from the body.

        Values keep any further colons (``url: https://x:8080`` works).
        Without frontmatter the mapping is empty and the body is unchanged.
        """
        match = _FRONTMATTER.match(markdown)
        if match is None:
            return {}, markdown

        frontmatter: dict[str, str] = {}
        for line in match.group(1).split("\n"):
            key, sep, value = line.partition(":")
            if key and sep:
                frontmatter[key.strip()] = value.strip()
        return frontmatter, match.group(2)

    @staticmethod
    def generate_toc(markdown: str) -> list[TocEntry]:
        """List every ATX header with its level and an anchor id."""
        return [
            TocEntry(
                level=len(match.group(1)),
                text=match.group(2),
                id=_SLUG_BREAK.sub("-", match.group(2).lower()),
            )
            for match in _TOC_HEADER.finditer(markdown)
        ]
