"""JSON GET helpers built on httpx, with and without the TTL cache."""
import json
import logging
from typing import Any

import httpx

from portfolio.core.cache import DEFAULT_EXPIRY, MemoryCache
from portfolio.core.config import settings
from portfolio.core.errors import FetchError

logger = logging.getLogger(__name__)


async def get_json(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    params: dict | None = None,
    headers: dict | None = None,
) -> Any:
    """GET url and decode the JSON body. Non-2xx responses raise FetchError."""
    if client is None:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT) as own_client:
            resp = await own_client.get(url, params=params, headers=headers)
    else:
        resp = await client.get(url, params=params, headers=headers)

    if not resp.is_success:
        logger.error(f"Fetch {url} failed: {resp.status_code} {resp.reason_phrase}")
        raise FetchError(
            f"Fetch error: {resp.status_code} {resp.reason_phrase}",
            status_code=resp.status_code,
        )
    return resp.json()


def fetch_cache_key(url: str, params: dict | None = None, headers: dict | None = None) -> str:
    options = json.dumps({"params": params, "headers": headers}, sort_keys=True, default=str)
    return f"fetch:{url}:{options}"


async def fetch_with_cache(
    cache: MemoryCache,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    params: dict | None = None,
    headers: dict | None = None,
    cache_time: float = DEFAULT_EXPIRY,
) -> Any:
    """Return the decoded JSON body for url, from the cache when possible.

    Failed responses are never cached, so the next call retries.
    """
    cache_key = fetch_cache_key(url, params, headers)
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    data = await get_json(url, client=client, params=params, headers=headers)
    cache.set(cache_key, data, cache_time)
    return data
