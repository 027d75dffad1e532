from __future__ import annotations

import re
from datetime import UTC, datetime
from email.utils import format_datetime
from xml.sax.saxutils import escape

from normalize.models import MergedFeed, NormalizedEntry


_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n\r\t]")
# characters XML 1.0 does not allow anywhere in a document
_XML_FORBIDDEN_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\uFFFE\uFFFF]")


def escape_xml(text: str) -> str:
    return escape(_XML_FORBIDDEN_RE.sub("", text), _XML_ENTITIES)


def wrap_cdata(text: str) -> str:
    text = _XML_FORBIDDEN_RE.sub("", text)
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def strip_non_printable(text: str) -> str:
    return _NON_PRINTABLE_RE.sub("", text)


def _render_item(item: NormalizedEntry) -> str:
    lines = ["    <item>"]
    lines.append(f"      <title>{escape_xml(item.title or 'Untitled')}</title>")
    if item.link:
        lines.append(f"      <link>{escape_xml(item.link)}</link>")
    lines.append(f"      <guid>{escape_xml(item.guid or item.link or '')}</guid>")

    pub_date = item.pub_date or item.iso_date
    if pub_date:
        lines.append(f"      <pubDate>{escape_xml(pub_date)}</pubDate>")

    if item.creator:
        lines.append(f"      <dc:creator>{wrap_cdata(item.creator)}</dc:creator>")

    if item.content_html:
        content = wrap_cdata(strip_non_printable(item.content_html))
        lines.append(f"      <content:encoded>{content}</content:encoded>")
    elif item.content_text:
        lines.append(
            f"      <description>{escape_xml(item.content_text)}</description>"
        )

    for category in item.categories:
        lines.append(f"      <category>{escape_xml(category)}</category>")

    if item.source_title and item.source_url:
        lines.append(
            f'      <source url="{escape_xml(item.source_url)}">'
            f"{escape_xml(item.source_title)}</source>"
        )

    lines.append("    </item>")
    return "\n".join(lines) + "\n"


def render_rss(
    feed: MergedFeed, *, generator: str, now: datetime | None = None
) -> str:
    build_date = format_datetime(now or datetime.now(tz=UTC), usegmt=True)
    items = "".join(_render_item(item) for item in feed.items)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/">\n'
        "  <channel>\n"
        f"    <title>{escape_xml(feed.title)}</title>\n"
        f"    <description>{escape_xml(feed.description)}</description>\n"
        f"    <link>{escape_xml(feed.link)}</link>\n"
        f"    <lastBuildDate>{build_date}</lastBuildDate>\n"
        f"    <generator>{escape_xml(generator)}</generator>\n"
        f"{items}"
        "  </channel>\n"
        "</rss>\n"
    )
