"""Generic Redis helpers returning structured results.

Cache methods sit on the real-time path, so they report failures as
``CacheResult(success=False, error=...)`` instead of raising.
"""

import functools
from collections.abc import Callable
from typing import Any

import redis
import structlog

from notifications.caching.connection import get_redis_client
from notifications.config import NotificationConfig, get_notification_config
from notifications.exceptions import (
    NotificationError,
    SerializationError,
    TenantValidationError,
)
from notifications.schemas.sse import CacheResult

logger = structlog.get_logger(__name__)


def cache_operation(operation: str) -> Callable:
    """Convert domain and Redis errors raised by a cache method into results."""

    def decorator(func: Callable[..., CacheResult]) -> Callable[..., CacheResult]:
        @functools.wraps(func)
        def wrapper(self: "BaseCache", *args: Any, **kwargs: Any) -> CacheResult:
            try:
                return func(self, *args, **kwargs)
            except TenantValidationError as exc:
                logger.warning(
                    "cache_tenant_rejected",
                    cache=self.cache_name,
                    operation=operation,
                    cuid=exc.cuid,
                )
                return CacheResult.fail(str(exc))
            except SerializationError as exc:
                logger.error(
                    "cache_serialization_failed",
                    cache=self.cache_name,
                    operation=operation,
                    error=str(exc),
                )
                return CacheResult.fail(str(exc))
            except (NotificationError, redis.RedisError) as exc:
                logger.error(
                    "cache_operation_failed",
                    cache=self.cache_name,
                    operation=operation,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                return CacheResult.fail(str(exc) or f"Cache {operation} error occurred")

        return wrapper

    return decorator


class BaseCache:
    """Redis-backed cache with tenant validation and TTL helpers."""

    def __init__(
        self,
        client: redis.Redis | None = None,
        config: NotificationConfig | None = None,
        cache_name: str | None = None,
    ):
        self.config = config or get_notification_config()
        self.client = (
            client if client is not None else get_redis_client(self.config.redis_url)
        )
        self.cache_name = cache_name or type(self).__name__

    def ensure_valid_tenant(self, cuid: Any) -> None:
        """Raise TenantValidationError unless ``cuid`` has the accepted format."""
        if not self.config.is_valid_tenant_id(cuid):
            raise TenantValidationError(cuid)

    @cache_operation("set_hash")
    def set_hash(
        self, key: str, mapping: dict[str, str], ttl: int | None = None
    ) -> CacheResult:
        """Store ``mapping`` as a hash, replacing its expiry when ``ttl`` is set."""
        if not key:
            return CacheResult.fail("Cache key is required")
        if not mapping:
            return CacheResult.fail("Invalid data object")

        pipe = self.client.pipeline()
        pipe.hset(key, mapping=mapping)
        if ttl:
            pipe.expire(key, ttl)
        pipe.execute()
        return CacheResult.ok()

    @cache_operation("get_hash")
    def get_hash(self, key: str, refresh_ttl: int | None = None) -> CacheResult:
        """Read a hash; with ``refresh_ttl`` the expiry slides forward on a hit."""
        if not key:
            return CacheResult.fail("Cache key is required")

        data = self.client.hgetall(key)
        if not data:
            return CacheResult.fail("Object not found or empty")
        if refresh_ttl:
            self.client.expire(key, refresh_ttl)
        return CacheResult.ok(data)

    @cache_operation("delete_keys")
    def delete_keys(self, *keys: str) -> CacheResult:
        if not keys:
            return CacheResult.fail("At least one key must be provided")
        deleted = self.client.delete(*keys)
        return CacheResult.ok({"deleted_count": deleted})

    @cache_operation("add_to_set")
    def add_to_set(self, key: str, member: str, ttl: int | None = None) -> CacheResult:
        pipe = self.client.pipeline()
        pipe.sadd(key, member)
        if ttl:
            pipe.expire(key, ttl)
        added, *_ = pipe.execute()
        return CacheResult.ok({"added": bool(added)})

    @cache_operation("remove_from_set")
    def remove_from_set(self, key: str, member: str) -> CacheResult:
        removed = self.client.srem(key, member)
        return CacheResult.ok({"removed": bool(removed)})

    @cache_operation("get_set_members")
    def get_set_members(self, key: str) -> CacheResult:
        """Return the members of a set in sorted order."""
        return CacheResult.ok(sorted(self.client.smembers(key)))

    @cache_operation("publish")
    def publish(self, channel: str, payload: str) -> CacheResult:
        receivers = self.client.publish(channel, payload)
        return CacheResult.ok({"channel": channel, "receivers": receivers})
