from __future__ import annotations

import json
import uuid

from normalize.models import MergedFeed, NormalizedEntry


JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


def _drop_none(doc: dict) -> dict:
    return {k: v for k, v in doc.items() if v is not None}


def _render_item(item: NormalizedEntry) -> dict:
    return _drop_none(
        {
            "id": item.guid or item.link or str(uuid.uuid4()),
            "url": item.link,
            "title": item.title,
            "content_html": item.content_html,
            "content_text": item.content_text,
            "date_published": item.iso_date or item.pub_date,
            "author": {"name": item.creator} if item.creator else None,
            "tags": list(item.categories) if item.categories else None,
        }
    )


def build_json_feed(feed: MergedFeed, *, feed_url: str, default_title: str) -> dict:
    doc = _drop_none(
        {
            "version": JSON_FEED_VERSION,
            "title": feed.title or default_title,
            "description": feed.description,
            "home_page_url": feed.link,
            "feed_url": feed_url,
        }
    )
    doc["items"] = [_render_item(item) for item in feed.items]
    return doc


def render_json_feed(feed: MergedFeed, *, feed_url: str, default_title: str) -> str:
    doc = build_json_feed(feed, feed_url=feed_url, default_title=default_title)
    return json.dumps(doc, indent=2, ensure_ascii=False)
