import asyncio
import logging
import time

import httpx
import pytest

from ingest.pipeline import fetch_all, fetch_source

from mock_feeds import (
    ATOM_URL,
    FIXTURES,
    JSON_URL,
    RSS_URL,
    fixture_routes,
    route_handler,
)


def _client(routes, seen=None) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(route_handler(routes, seen)))


@pytest.mark.asyncio
async def test_fetch_source_rss_path(settings) -> None:
    async with _client(fixture_routes()) as client:
        result = await fetch_source(client, RSS_URL, settings)

    assert result.title == "Example News"
    assert [e.title for e in result.entries] == ["Example headline", "Older headline"]
    assert all(e.source_url == RSS_URL for e in result.entries)
    assert all(e.source_title == "Example News" for e in result.entries)


@pytest.mark.asyncio
async def test_fetch_source_json_path(settings) -> None:
    async with _client(fixture_routes()) as client:
        result = await fetch_source(client, JSON_URL, settings)

    assert result.title == "Example JSON"
    assert [e.guid for e in result.entries] == ["json-1", "json-2"]
    assert all(e.source_url == JSON_URL for e in result.entries)


@pytest.mark.asyncio
async def test_unreachable_source_yields_empty_result(settings, caplog) -> None:
    url = "https://offline.example.com/rss"
    with caplog.at_level(logging.WARNING, logger="ingest.pipeline"):
        async with _client({}) as client:
            result = await fetch_source(client, url, settings)

    assert result.title is None
    assert result.entries == []
    assert url in caplog.text


@pytest.mark.asyncio
async def test_http_error_and_malformed_bodies_yield_empty_results(settings) -> None:
    not_found = "https://gone.example.com/rss"
    broken_xml = "https://broken.example.com/rss"
    broken_json = "https://broken.example.com/feed.json"
    routes = {
        not_found: (404, b"missing", {"Content-Type": "text/html"}),
        broken_xml: (200, b"this is not a feed <<<", {"Content-Type": "text/xml"}),
        broken_json: (
            200,
            b'{"version": "https://jsonfeed.org/version/1.1", "items": "nope"}',
            {"Content-Type": "application/feed+json"},
        ),
    }
    async with _client(routes) as client:
        for url in (not_found, broken_xml, broken_json):
            result = await fetch_source(client, url, settings)
            assert result.entries == []
            assert result.title is None


@pytest.mark.asyncio
async def test_fetch_all_isolates_failures_and_keeps_source_order(settings) -> None:
    seen: list[str] = []
    urls = [JSON_URL, "https://offline.example.com/rss", RSS_URL, ATOM_URL]
    async with _client(fixture_routes(), seen) as client:
        results = await fetch_all(client, urls, settings)

    assert [r.url for r in results] == urls
    assert [len(r.entries) for r in results] == [2, 0, 2, 1]
    assert set(seen) == set(urls)


@pytest.mark.asyncio
async def test_fetch_source_contains_unexpected_errors(settings, monkeypatch) -> None:
    def explode(*args, **kwargs):
        raise RuntimeError("parser bug")

    monkeypatch.setattr("ingest.pipeline.parse_rss", explode)
    async with _client(fixture_routes()) as client:
        result = await fetch_source(client, RSS_URL, settings)

    assert result.entries == []


@pytest.mark.asyncio
async def test_fetch_all_requests_sources_concurrently(settings) -> None:
    delay = 0.2
    body = (FIXTURES / "sample.rss.xml").read_bytes()
    events: list[tuple[str, str]] = []

    async def slow_handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        events.append(("start", url))
        await asyncio.sleep(delay)
        events.append(("end", url))
        return httpx.Response(
            200, content=body, headers={"Content-Type": "application/rss+xml"}
        )

    urls = [f"https://slow{i}.example.com/rss" for i in range(5)]
    started = time.monotonic()
    async with httpx.AsyncClient(transport=httpx.MockTransport(slow_handler)) as client:
        results = await fetch_all(client, urls, settings)
    elapsed = time.monotonic() - started

    assert [len(r.entries) for r in results] == [2] * len(urls)
    first_end = next(i for i, (kind, _) in enumerate(events) if kind == "end")
    assert {url for _, url in events[:first_end]} == set(urls)
    # two requests per source (format detection, then the feed itself)
    assert elapsed < len(urls) * 2 * delay / 2
