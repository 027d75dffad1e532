from __future__ import annotations

import httpx


JSON_ACCEPT = "application/json, application/feed+json, */*"
FEED_ACCEPT = (
    "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"
)


def build_timeout(connect: float, read: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect, read=read, write=5.0, pool=5.0)


async def fetch(
    client: httpx.AsyncClient,
    *,
    url: str,
    user_agent: str,
    accept: str,
    timeout: httpx.Timeout,
) -> tuple[int, bytes | None, dict[str, str]]:
    headers = {"User-Agent": user_agent, "Accept": accept}
    response = await client.get(url, headers=headers, timeout=timeout)
    return (
        response.status_code,
        (response.content if response.is_success else None),
        dict(response.headers),
    )
