from __future__ import annotations

from app.errors import NoSourcesProvided
from ingest.permalink import decode_feeds


def resolve_sources(feeds_token: str | None, urls: list[str]) -> list[str]:
    """Return the source URLs for a merge request.

    A present ``feeds`` token wins and must decode cleanly; the repeated
    ``url`` parameters are only read when the token is absent.
    """
    if feeds_token:
        candidates = decode_feeds(feeds_token)
    else:
        candidates = urls

    resolved = [u.strip() for u in candidates if u and u.strip()]
    if not resolved:
        raise NoSourcesProvided("No RSS feed URLs provided")
    return resolved
