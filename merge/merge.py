from __future__ import annotations

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from normalize.models import MergedFeed, NormalizedEntry, SourceResult
from normalize.normalize import parse_iso


EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _parse_pub_date(pub_date: str | None) -> datetime | None:
    if not pub_date:
        return None
    try:
        dt = parsedate_to_datetime(pub_date)
    except (TypeError, ValueError):
        return parse_iso(pub_date)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def effective_time(entry: NormalizedEntry) -> datetime:
    """Sort key: parsed date, then the raw pubDate string, then the epoch."""
    if entry.published_at is not None:
        return entry.published_at
    return _parse_pub_date(entry.pub_date) or EPOCH


def describe_sources(results: list[SourceResult]) -> str:
    titles = [r.title for r in results if r.title]
    if not titles:
        return "Combined feed from multiple sources"
    return f"Combined feed from {', '.join(titles)}"


def merge_feeds(
    results: list[SourceResult],
    *,
    link: str,
    title: str,
    max_items: int,
) -> MergedFeed:
    entries: list[NormalizedEntry] = []
    for result in results:
        entries.extend(result.entries)

    # sorted() is stable, so equal timestamps keep source order
    entries = sorted(entries, key=effective_time, reverse=True)

    return MergedFeed(
        title=title,
        description=describe_sources(results),
        link=link,
        items=entries[:max_items],
    )
