from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from app.errors import InvalidInput, NoSourcesProvided
from app.settings import Settings
from ingest.permalink import build_permalink, decode_feeds, encode_feeds
from ingest.pipeline import fetch_all
from ingest.sources import resolve_sources
from merge.merge import merge_feeds
from render.jsonfeed import render_json_feed
from render.rss import render_rss


logger = logging.getLogger(__name__)

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"
JSON_FEED_MEDIA_TYPE = "application/feed+json; charset=utf-8"
_JSON_FORMATS = ("json", "jsonfeed")


def _cache_control(max_age: int) -> str:
    return f"max-age={max_age}, s-maxage={max_age}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.state.settings = settings
    async with httpx.AsyncClient(follow_redirects=True) as client:
        app.state.client = client
        yield


app = FastAPI(lifespan=lifespan)


@app.exception_handler(InvalidInput)
@app.exception_handler(NoSourcesProvided)
async def bad_request_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.get("/healthz")
def healthz() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@app.get("/api/merge")
async def api_merge(
    request: Request,
    feeds: str | None = None,
    url: list[str] = Query(default=[]),
    output_format: str = Query(default="rss", alias="format"),
) -> Response:
    settings: Settings = request.app.state.settings
    client: httpx.AsyncClient = request.app.state.client

    urls = resolve_sources(feeds, url)
    results = await fetch_all(client, urls, settings)

    request_url = str(request.url)
    merged = merge_feeds(
        results,
        link=request_url,
        title=settings.feed_title,
        max_items=settings.max_items,
    )
    logger.info(
        "merged %d sources into %d items (format=%s)",
        len(urls),
        len(merged.items),
        output_format,
    )

    headers = {"Cache-Control": _cache_control(settings.cache_max_age_seconds)}
    if output_format in _JSON_FORMATS:
        body = render_json_feed(
            merged, feed_url=request_url, default_title=settings.feed_title
        )
        return Response(content=body, media_type=JSON_FEED_MEDIA_TYPE, headers=headers)

    body = render_rss(merged, generator=settings.feed_generator)
    return Response(content=body, media_type=RSS_MEDIA_TYPE, headers=headers)


@app.get("/api/permalink")
def api_permalink(request: Request, url: list[str] = Query(default=[])) -> JSONResponse:
    urls = [u.strip() for u in url if u.strip()]
    if not urls:
        raise NoSourcesProvided("No RSS feed URLs provided")
    return JSONResponse(
        {
            "feeds": encode_feeds(urls),
            "permalink": build_permalink(str(request.base_url), urls),
        }
    )


@app.get("/api/permalink/feeds")
def api_permalink_feeds(feeds: str | None = None) -> JSONResponse:
    if not feeds:
        raise InvalidInput("Missing feeds parameter")
    return JSONResponse({"feeds": decode_feeds(feeds)})
