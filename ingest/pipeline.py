from __future__ import annotations

import asyncio
import logging

import httpx

from app.errors import SourceUnavailable
from app.settings import Settings
from ingest.detect import detect_format
from ingest.fetch import FEED_ACCEPT, JSON_ACCEPT, build_timeout, fetch
from ingest.parsers.jsonfeed import parse_json_feed
from ingest.parsers.rss import parse_rss
from normalize.models import SourceResult
from normalize.normalize import normalize_json_feed_item, normalize_rss_entry


logger = logging.getLogger(__name__)


async def _fetch_body(
    client: httpx.AsyncClient,
    *,
    url: str,
    accept: str,
    user_agent: str,
    timeout: httpx.Timeout,
) -> tuple[bytes, str | None]:
    try:
        status_code, content, headers = await fetch(
            client, url=url, user_agent=user_agent, accept=accept, timeout=timeout
        )
    except httpx.TimeoutException as e:
        raise SourceUnavailable(url, "timeout") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise SourceUnavailable(url, f"request_error:{e.__class__.__name__}") from e

    if content is None:
        raise SourceUnavailable(url, f"http_{status_code}")
    return content, headers.get("content-type")


async def _load_json_feed(
    client: httpx.AsyncClient, url: str, settings: Settings, timeout: httpx.Timeout
) -> SourceResult:
    content, _ = await _fetch_body(
        client,
        url=url,
        accept=JSON_ACCEPT,
        user_agent=settings.user_agent,
        timeout=timeout,
    )
    try:
        parsed = parse_json_feed(content)
    except ValueError as e:
        raise SourceUnavailable(url, f"parse_error:{e}") from e

    title = parsed["title"]
    entries = [
        normalize_json_feed_item(record=record, source_title=title, source_url=url)
        for record in parsed["entries"]
    ]
    return SourceResult(url=url, title=title, entries=entries)


async def _load_xml_feed(
    client: httpx.AsyncClient, url: str, settings: Settings, timeout: httpx.Timeout
) -> SourceResult:
    content, content_type = await _fetch_body(
        client,
        url=url,
        accept=FEED_ACCEPT,
        user_agent=settings.user_agent,
        timeout=timeout,
    )
    try:
        parsed = parse_rss(content, content_type)
    except ValueError as e:
        raise SourceUnavailable(url, f"parse_error:{e}") from e

    title = parsed["title"] or None
    entries = [
        normalize_rss_entry(record=record, source_title=title, source_url=url)
        for record in parsed["entries"]
    ]
    return SourceResult(url=url, title=title, entries=entries)


async def fetch_source(
    client: httpx.AsyncClient, url: str, settings: Settings
) -> SourceResult:
    """Fetch and normalize one source; a failing source yields no entries.

    This is the per-source isolation boundary: nothing raised while loading
    ``url`` reaches the caller.
    """
    timeout = build_timeout(settings.fetch_connect_timeout, settings.fetch_read_timeout)
    try:
        feed_format = await detect_format(
            client, url=url, user_agent=settings.user_agent, timeout=timeout
        )
        if feed_format == "json":
            return await _load_json_feed(client, url, settings, timeout)
        return await _load_xml_feed(client, url, settings, timeout)
    except SourceUnavailable as e:
        logger.warning("source unavailable %s: %s", url, e.reason)
    except Exception:
        logger.exception("error loading source %s", url)
    return SourceResult(url=url, title=None, entries=[])


async def fetch_all(
    client: httpx.AsyncClient, urls: list[str], settings: Settings
) -> list[SourceResult]:
    results = await asyncio.gather(
        *(fetch_source(client, url, settings) for url in urls)
    )
    return list(results)
