import pytest
from lzstring import LZString

from app.errors import InvalidInput, NoSourcesProvided
from ingest.permalink import build_permalink, decode_feeds, encode_feeds
from ingest.sources import resolve_sources


FEEDS = [
    "https://feeds.arstechnica.com/arstechnica/features",
    "https://example.com/feed.json?lang=en&x=1",
    "https://例え.jp/rss",
]


def test_token_round_trip() -> None:
    token = encode_feeds(FEEDS)
    assert decode_feeds(token) == FEEDS
    assert decode_feeds(encode_feeds([])) == []


def test_token_is_uri_safe() -> None:
    token = encode_feeds(FEEDS)
    allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+-$")
    assert set(token) <= allowed


def test_decode_tolerates_plus_turned_into_space() -> None:
    token = encode_feeds(FEEDS * 3)
    assert decode_feeds(token.replace("+", " ")) == FEEDS * 3


@pytest.mark.parametrize("token", ["%%%", "!!!not-a-token!!!"])
def test_decode_rejects_corrupt_tokens(token: str) -> None:
    with pytest.raises(InvalidInput):
        decode_feeds(token)


def test_decode_rejects_non_list_payloads() -> None:
    codec = LZString()
    for payload in ('{"url": "https://a.example/"}', "[1, 2]", "not json at all"):
        with pytest.raises(InvalidInput):
            decode_feeds(codec.compressToEncodedURIComponent(payload))


def test_build_permalink() -> None:
    link = build_permalink("https://merge.example/", FEEDS)
    assert link.startswith("https://merge.example/api/merge?feeds=")


def test_resolve_prefers_token_over_url_params() -> None:
    token = encode_feeds(["https://a.example/rss"])
    assert resolve_sources(token, ["https://ignored.example/rss"]) == [
        "https://a.example/rss"
    ]


def test_resolve_falls_back_to_url_params_when_token_absent() -> None:
    urls = ["https://a.example/rss", "https://b.example/rss"]
    assert resolve_sources(None, urls) == urls
    assert resolve_sources("", urls) == urls


def test_resolve_does_not_fall_back_on_bad_token() -> None:
    with pytest.raises(InvalidInput):
        resolve_sources("%%%", ["https://a.example/rss"])


def test_resolve_empty_sets() -> None:
    with pytest.raises(NoSourcesProvided):
        resolve_sources(None, [])
    with pytest.raises(NoSourcesProvided):
        resolve_sources(encode_feeds([]), [])
    with pytest.raises(NoSourcesProvided):
        resolve_sources(None, ["", "   "])
