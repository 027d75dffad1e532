from __future__ import annotations

import html
import re
from datetime import UTC, datetime

from normalize.models import NormalizedEntry


_HTML_TAG_RE = re.compile(r"<[^>]+>", flags=re.UNICODE)
_WS_RE = re.compile(r"\s+", flags=re.UNICODE)


def parse_iso(ts: str | None) -> datetime | None:
    if not ts:
        return None
    try:
        if ts.endswith("Z"):
            dt = datetime.fromisoformat(ts.removesuffix("Z") + "+00:00")
        else:
            dt = datetime.fromisoformat(ts)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(tz=UTC)


def _text_or_none(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def html_to_text(content_html: str | None) -> str | None:
    if not content_html:
        return None
    text = html.unescape(_HTML_TAG_RE.sub(" ", content_html))
    text = _WS_RE.sub(" ", text).strip()
    return text or None


def normalize_rss_entry(
    *, record: dict, source_title: str | None, source_url: str
) -> NormalizedEntry:
    content_html = _text_or_none(record.get("content"))
    content_text = html_to_text(record.get("summary")) or html_to_text(content_html)

    return NormalizedEntry(
        title=_text_or_none(record.get("title")),
        link=_text_or_none(record.get("link")),
        guid=_text_or_none(record.get("id")),
        published_at=record.get("published_at"),
        pub_date=_text_or_none(record.get("published")),
        content_html=content_html,
        content_text=content_text,
        creator=_text_or_none(record.get("author")),
        categories=[str(c) for c in record.get("categories") or []],
        source_title=source_title,
        source_url=source_url,
    )


def _json_feed_creator(record: dict) -> str | None:
    author = record.get("author")
    if isinstance(author, dict) and author.get("name"):
        return str(author["name"])
    authors = record.get("authors")
    if isinstance(authors, list):
        for candidate in authors:
            if isinstance(candidate, dict) and candidate.get("name"):
                return str(candidate["name"])
    return None


def normalize_json_feed_item(
    *, record: dict, source_title: str | None, source_url: str
) -> NormalizedEntry:
    date_published = _text_or_none(record.get("date_published"))
    tags = record.get("tags")

    return NormalizedEntry(
        title=_text_or_none(record.get("title")),
        link=_text_or_none(record.get("url"))
        or _text_or_none(record.get("external_url")),
        guid=_text_or_none(record.get("id")),
        published_at=parse_iso(date_published),
        pub_date=date_published,
        content_html=_text_or_none(record.get("content_html")),
        content_text=_text_or_none(record.get("content_text"))
        or _text_or_none(record.get("summary")),
        creator=_json_feed_creator(record),
        categories=[str(t) for t in tags if t] if isinstance(tags, list) else [],
        source_title=source_title,
        source_url=source_url,
    )
