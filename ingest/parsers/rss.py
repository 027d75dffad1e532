from __future__ import annotations

from datetime import UTC, datetime

import feedparser


def _struct_to_datetime(value) -> datetime | None:
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=UTC)
    except (TypeError, ValueError):
        return None


def parse_rss(data: bytes, content_type: str | None = None) -> dict:
    """Parse RSS 0.9x/1.0/2.0 or Atom bytes with feedparser.

    feedparser folds ``content:encoded`` into ``content`` and ``dc:creator``
    into ``author``, so both extensions come through without custom fields.
    """
    response_headers = {"content-type": content_type} if content_type else None
    parsed = feedparser.parse(data, response_headers=response_headers)
    if parsed.bozo and not parsed.entries:
        raise ValueError(f"unparseable feed: {parsed.get('bozo_exception')!r}")

    records: list[dict] = []
    for entry in parsed.entries:
        content = None
        if "content" in entry and entry["content"]:
            content = entry["content"][0].get("value")

        published = entry.get("published") or entry.get("updated")
        published_at = _struct_to_datetime(
            entry.get("published_parsed") or entry.get("updated_parsed")
        )

        categories = [
            str(tag["term"]) for tag in entry.get("tags") or [] if tag.get("term")
        ]

        records.append(
            {
                "id": entry.get("id"),
                "link": entry.get("link"),
                "title": entry.get("title"),
                "summary": entry.get("summary"),
                "content": content,
                "author": entry.get("author"),
                "published": published,
                "published_at": published_at,
                "categories": categories,
            }
        )

    return {"title": parsed.feed.get("title"), "entries": records}
