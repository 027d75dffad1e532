from __future__ import annotations

import json
from urllib.parse import urlencode

from lzstring import LZString

from app.errors import InvalidInput


_codec = LZString()


def encode_feeds(urls: list[str]) -> str:
    data = json.dumps(urls, separators=(",", ":"), ensure_ascii=False)
    return _codec.compressToEncodedURIComponent(data)


def decode_feeds(token: str) -> list[str]:
    try:
        decompressed = _codec.decompressFromEncodedURIComponent(token)
    except Exception as e:
        # lzstring signals corrupt input through whatever error its lookup tables hit
        raise InvalidInput("Invalid compressed feeds parameter") from e
    if not decompressed:
        raise InvalidInput("Invalid compressed feeds parameter")

    try:
        urls = json.loads(decompressed)
    except json.JSONDecodeError as e:
        raise InvalidInput("Invalid compressed feeds parameter") from e
    if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
        raise InvalidInput("Invalid compressed feeds parameter")
    return urls


def build_permalink(base_url: str, urls: list[str]) -> str:
    query = urlencode({"feeds": encode_feeds(urls)})
    return f"{base_url.rstrip('/')}/api/merge?{query}"
