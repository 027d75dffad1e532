from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

from app.settings import Settings
from ingest.permalink import build_permalink
from ingest.pipeline import fetch_all
from ingest.sources import resolve_sources
from merge.merge import merge_feeds
from render.jsonfeed import render_json_feed
from render.rss import render_rss


async def build_document(
    urls: list[str], *, output_format: str, link: str, settings: Settings
) -> str:
    async with httpx.AsyncClient(follow_redirects=True) as client:
        results = await fetch_all(client, urls, settings)
    merged = merge_feeds(
        results, link=link, title=settings.feed_title, max_items=settings.max_items
    )
    if output_format == "json":
        return render_json_feed(
            merged, feed_url=link, default_title=settings.feed_title
        )
    return render_rss(merged, generator=settings.feed_generator)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Merge feeds into one document.")
    parser.add_argument("urls", nargs="+")
    parser.add_argument("--format", choices=("rss", "json"), default="rss")
    parser.add_argument("--out", type=Path, default=None)
    parser.add_argument("--link", default="")
    parser.add_argument(
        "--permalink",
        metavar="BASE_URL",
        default=None,
        help="print the shareable merge URL under BASE_URL instead of fetching",
    )
    args = parser.parse_args(argv)

    urls = resolve_sources(None, args.urls)
    if args.permalink:
        print(build_permalink(args.permalink, urls))
        return

    settings = Settings()
    document = asyncio.run(
        build_document(
            urls, output_format=args.format, link=args.link, settings=settings
        )
    )
    if args.out is None:
        sys.stdout.write(document)
        return

    args.out.parent.mkdir(parents=True, exist_ok=True)
    args.out.write_text(document, encoding="utf-8")
    print(args.out)


if __name__ == "__main__":
    main()
