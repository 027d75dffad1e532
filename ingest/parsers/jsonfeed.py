from __future__ import annotations

import json


def is_json_feed_document(doc: object) -> bool:
    if not isinstance(doc, dict):
        return False
    version = doc.get("version")
    return isinstance(version, str) and "jsonfeed.org" in version


def parse_json_feed(data: bytes) -> dict:
    doc = json.loads(data)
    if not isinstance(doc, dict):
        raise ValueError("JSON Feed document must be an object")
    items = doc.get("items")
    if not isinstance(items, list):
        raise ValueError("JSON Feed document has no items list")
    title = doc.get("title")
    return {
        "title": str(title) if title else None,
        "entries": [item for item in items if isinstance(item, dict)],
    }
