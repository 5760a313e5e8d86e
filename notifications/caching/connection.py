"""Shared Redis client for key-value bookkeeping and pub/sub."""

from functools import lru_cache

import redis


@lru_cache(maxsize=8)
def get_redis_client(url: str) -> redis.Redis:
    """Return a process-wide client for ``url``.

    Responses are decoded to ``str`` so hash fields, set members and pub/sub
    payloads arrive as text.
    """
    return redis.Redis.from_url(url, decode_responses=True, health_check_interval=30)
