from __future__ import annotations

import json
import logging
from typing import Literal

import httpx

from app.errors import DetectionAmbiguous
from ingest.fetch import JSON_ACCEPT, fetch
from ingest.parsers.jsonfeed import is_json_feed_document


logger = logging.getLogger(__name__)

FeedFormat = Literal["json", "xml"]

_JSON_CONTENT_TYPES = ("application/feed+json", "application/json")


def _classify(
    status_code: int, content: bytes | None, headers: dict[str, str]
) -> FeedFormat:
    if content is None:
        raise DetectionAmbiguous(f"probe returned http_{status_code}")
    content_type = headers.get("content-type", "").lower()
    if not any(t in content_type for t in _JSON_CONTENT_TYPES):
        return "xml"
    try:
        doc = json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DetectionAmbiguous(f"json content-type but undecodable body: {e}") from e
    if not is_json_feed_document(doc):
        raise DetectionAmbiguous("json body without a jsonfeed.org version")
    return "json"


async def detect_format(
    client: httpx.AsyncClient,
    *,
    url: str,
    user_agent: str,
    timeout: httpx.Timeout,
) -> FeedFormat:
    """Classify ``url`` as JSON Feed or XML (RSS/Atom).

    Anything other than a positive JSON Feed identification, including
    transport errors, falls back to ``"xml"``.
    """
    try:
        status_code, content, headers = await fetch(
            client, url=url, user_agent=user_agent, accept=JSON_ACCEPT, timeout=timeout
        )
        return _classify(status_code, content, headers)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug("format probe failed for %s: %s", url, e.__class__.__name__)
    except DetectionAmbiguous as e:
        logger.debug("format probe inconclusive for %s: %s", url, e)
    return "xml"
