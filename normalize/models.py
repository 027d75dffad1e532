from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class NormalizedEntry:
    source_url: str
    title: str | None = None
    link: str | None = None
    guid: str | None = None
    published_at: datetime | None = None
    pub_date: str | None = None
    content_html: str | None = None
    content_text: str | None = None
    creator: str | None = None
    categories: list[str] = field(default_factory=list)
    source_title: str | None = None

    @property
    def iso_date(self) -> str | None:
        if self.published_at is None:
            return None
        return (
            self.published_at.astimezone(tz=UTC)
            .isoformat()
            .replace("+00:00", "Z")
        )


@dataclass(frozen=True)
class SourceResult:
    url: str
    title: str | None
    entries: list[NormalizedEntry]


@dataclass(frozen=True)
class MergedFeed:
    title: str
    description: str
    link: str
    items: list[NormalizedEntry]
