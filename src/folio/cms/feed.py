"""RSS 2.0 feed for published entries."""

from datetime import UTC, datetime
from email.utils import format_datetime
from xml.sax.saxutils import escape

from folio.cms.models import Entry

FEED_TITLE = "Infinite Canvas Blog"
FEED_DESCRIPTION = "Visual thoughts in an endless scroll"


def parse_timestamp(value: str) -> datetime:
    """Read a stored ``YYYY-MM-DD HH:MM:SS`` (or ISO 8601) timestamp as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def describe_entry(entry: Entry) -> str:
    """HTML description of an entry for feed readers."""
    content = entry.content_data
    match entry.type:
        case "text":
            return str(content.get("text", ""))
        case "image":
            html = f'<img src="{content.get("url", "")}" alt="{content.get("alt") or ""}" />'
            if content.get("caption"):
                html += f"<p>{content['caption']}</p>"
            return html
        case "gif":
            return f'<img src="{content.get("url", "")}" alt="{content.get("title") or "GIF"}" />'
        case "quote":
            author = f" &mdash; {content['author']}" if content.get("author") else ""
            return f'<blockquote>"{content.get("text", "")}"{author}</blockquote>'
        case _:
            return ""


def _cdata(text: str) -> str:
    # A literal "]]>" would end the section early.
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def build_rss(entries: list[Entry], host: str, now: datetime | None = None) -> str:
    """Render *entries* as an RSS 2.0 document for the site at *host*."""
    base = f"https://{escape(host)}"
    built = format_datetime(now or datetime.now(UTC), usegmt=True)

    items = []
    for entry in entries:
        link = f"{base}/blog/entry/{entry.id}"
        items.append(
            "    <item>\n"
            f"      <title>{escape(entry.type.capitalize())} Entry</title>\n"
            f"      <link>{link}</link>\n"
            f"      <guid>{link}</guid>\n"
            f"      <pubDate>{format_datetime(parse_timestamp(entry.created_at), usegmt=True)}</pubDate>\n"
            f"      <description>{_cdata(describe_entry(entry))}</description>\n"
            "    </item>"
        )

    return (
        '<?xml version="1.0" encoding="UTF-8" ?>\n'
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">\n'
        "  <channel>\n"
        f"    <title>{FEED_TITLE}</title>\n"
        f"    <link>{base}/blog</link>\n"
        f"    <description>{FEED_DESCRIPTION}</description>\n"
        "    <language>en-us</language>\n"
        f"    <lastBuildDate>{built}</lastBuildDate>\n"
        f'    <atom:link href="{base}/rss.xml" rel="self" type="application/rss+xml" />\n'
        + "\n".join(items)
        + ("\n" if items else "")
        + "  </channel>\n"
        "</rss>\n"
    )
