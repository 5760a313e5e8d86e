"""Redis-backed caches for channel bookkeeping and fan-out."""

from notifications.caching.base_cache import BaseCache, cache_operation
from notifications.caching.connection import get_redis_client
from notifications.caching.sse_cache import SSECache

__all__ = ["BaseCache", "SSECache", "cache_operation", "get_redis_client"]
