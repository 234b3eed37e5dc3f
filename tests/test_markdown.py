"""Tests for folio.markdown: regex Markdown converter and template filter."""

from __future__ import annotations

from kida.template import Markup

from folio.markdown import MarkdownParser, TocEntry, markdown_filter

P = '<p class="my-4 leading-relaxed">'


class TestParseBasics:
    def test_empty_input(self) -> None:
        assert MarkdownParser.parse("") == ""

    def test_non_string_input(self) -> None:
        assert MarkdownParser.parse(None) == ""
        assert MarkdownParser.parse(42) == ""

    def test_paragraph(self) -> None:
        assert MarkdownParser.parse("Hello, world!") == f"{P}Hello, world!</p>"

    def test_blank_lines_split_paragraphs(self) -> None:
        html = MarkdownParser.parse("one\n\ntwo")
        assert html == f"{P}one</p>\n{P}two</p>"


class TestHeaders:
    def test_h1(self) -> None:
        assert MarkdownParser.parse("# Hello") == "<h1>Hello</h1>"

    def test_h3(self) -> None:
        assert MarkdownParser.parse("### Third") == "<h3>Third</h3>"

    def test_h6_not_mistaken_for_h1(self) -> None:
        assert MarkdownParser.parse("###### Deep") == "<h6>Deep</h6>"

    def test_header_needs_space(self) -> None:
        assert "<h1>" not in MarkdownParser.parse("#hashtag")


class TestInline:
    def test_bold_and_italic(self) -> None:
        html = MarkdownParser.parse("**bold** and *italic*")
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html

    def test_underscore_variants(self) -> None:
        html = MarkdownParser.parse("__bold__ and _italic_")
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html

    def test_bold_italic(self) -> None:
        assert "<strong><em>both</em></strong>" in MarkdownParser.parse("***both***")

    def test_link(self) -> None:
        html = MarkdownParser.parse("See [the site](https://example.com) now")
        assert '<a href="https://example.com" class="link">the site</a>' in html

    def test_image(self) -> None:
        html = MarkdownParser.parse("![A photo](/images/photo.png)")
        assert '<img src="/images/photo.png" alt="A photo"' in html
        assert "<a " not in html

    def test_inline_code(self) -> None:
        html = MarkdownParser.parse("Run `folio serve` first")
        assert (
            '<code class="bg-gray-100 px-2 py-1 rounded text-sm font-mono">folio serve</code>'
            in html
        )

    def test_fenced_code(self) -> None:
        html = MarkdownParser.parse("```\nprint(1)\n```")
        assert html.startswith('<pre class="bg-gray-100 p-4 rounded-lg overflow-x-auto my-4">')
        assert "<code>\nprint(1)\n</code>" in html


class TestBlocks:
    def test_horizontal_rule(self) -> None:
        html = MarkdownParser.parse("above\n\n---\n\nbelow")
        assert "<hr>" in html

    def test_unordered_list(self) -> None:
        html = MarkdownParser.parse("- one\n- two")
        assert html.startswith('<ul class="list-disc list-inside my-4 space-y-2">')
        assert '<li class="ml-4">one</li>' in html
        assert '<li class="ml-4">two</li>' in html

    def test_ordered_list(self) -> None:
        html = MarkdownParser.parse("1. first\n2. second")
        assert html.startswith('<ol class="list-decimal list-inside my-4 space-y-2">')
        assert '<li class="ml-4">first</li>' in html
        assert '<li class="ml-4">second</li>' in html

    def test_blockquote(self) -> None:
        html = MarkdownParser.parse("> The room is part of the instrument.")
        assert html == (
            '<blockquote class="border-l-4 border-gray-300 pl-4 italic my-4">'
            "The room is part of the instrument.</blockquote>"
        )

    def test_table(self) -> None:
        html = MarkdownParser.parse("| Name | Layer |\n|---|---|\n| Dante | 3 |\n| MADI | 1 |")
        assert html.startswith('<div class="overflow-x-auto my-6">')
        assert '<th class="px-4 py-2 text-left font-semibold border-b">Name</th>' in html
        assert '<td class="px-4 py-2 border-b">Dante</td>' in html
        assert html.count("<tr>") == 3

    def test_html_blocks_not_wrapped(self) -> None:
        html = MarkdownParser.parse("# Title\n\nBody text")
        assert html == f"<h1>Title</h1>\n{P}Body text</p>"


class TestFrontmatter:
    def test_extracts_pairs(self) -> None:
        meta, body = MarkdownParser.extract_frontmatter(
            "---\ntitle: Hello\nauthor: Chris Lyons\n---\n# Body"
        )
        assert meta == {"title": "Hello", "author": "Chris Lyons"}
        assert body == "# Body"

    def test_value_keeps_colons(self) -> None:
        meta, _ = MarkdownParser.extract_frontmatter("---\nurl: https://x.dev:8080/a\n---\n")
        assert meta == {"url": "https://x.dev:8080/a"}

    def test_without_frontmatter(self) -> None:
        source = "# Just a document"
        assert MarkdownParser.extract_frontmatter(source) == ({}, source)

    def test_lines_without_colon_ignored(self) -> None:
        meta, _ = MarkdownParser.extract_frontmatter("---\ntitle: A\njunk\n---\nbody")
        assert meta == {"title": "A"}


class TestToc:
    def test_levels_and_ids(self) -> None:
        toc = MarkdownParser.generate_toc("# Hello World\n\ntext\n\n## Sub-Section")
        assert toc == [
            TocEntry(level=1, text="Hello World", id="hello-world"),
            TocEntry(level=2, text="Sub-Section", id="sub-section"),
        ]

    def test_no_headers(self) -> None:
        assert MarkdownParser.generate_toc("plain text") == []


class TestFilter:
    def test_returns_markup(self) -> None:
        result = markdown_filter("**x**")
        assert isinstance(result, Markup)
        assert "<strong>x</strong>" in result

    def test_none_is_empty(self) -> None:
        assert markdown_filter(None) == ""
