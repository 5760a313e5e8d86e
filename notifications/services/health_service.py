"""Health check service with cached dependency probes."""

import os
import time

import redis
import structlog
from django.db import connection
from django.db.utils import OperationalError

from notifications.caching import get_redis_client
from notifications.config import get_notification_config
from notifications.constants import HEALTH_CACHE_SECONDS
from notifications.enums import HealthStatus
from notifications.logging.processors import SERVICE_NAME_DEFAULT
from notifications.schemas.health import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)

logger = structlog.get_logger(__name__)


class HealthService:
    """Service for performing health checks with caching."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        cache_ttl_seconds: float = HEALTH_CACHE_SECONDS,
    ) -> None:
        """Initialize the health service.

        Args:
            redis_client: Client to probe; built from settings on first use
            cache_ttl_seconds: Time to live for cached health check results
        """
        self._redis_client = redis_client
        self.cache_ttl_seconds = cache_ttl_seconds
        self._db_health_cache: DependencyHealth | None = None
        self._db_health_cache_time: float = 0.0
        self._redis_health_cache: DependencyHealth | None = None
        self._redis_health_cache_time: float = 0.0

    @property
    def redis_client(self) -> redis.Redis:
        if self._redis_client is None:
            self._redis_client = get_redis_client(get_notification_config().redis_url)
        return self._redis_client

    def get_liveness_status(self) -> LivenessResponse:
        """Get liveness status (always returns alive)."""
        return LivenessResponse(
            status="alive", service=os.getenv("SERVICE_NAME", SERVICE_NAME_DEFAULT)
        )

    def get_readiness_status(self) -> ReadinessResponse:
        """Get readiness status with database and Redis health checks.

        Returns degraded (ready=True, degraded=True) when a dependency is
        down, so the service stays deployable while connections recover.
        """
        db_health = self.check_database_health()
        redis_health = self.check_redis_health()
        dependencies = {"database": db_health, "redis": redis_health}

        if db_health.healthy and redis_health.healthy:
            return ReadinessResponse(
                ready=True, status="ready", degraded=False, dependencies=dependencies
            )
        return ReadinessResponse(
            ready=True, status="degraded", degraded=True, dependencies=dependencies
        )

    def check_database_health(self) -> DependencyHealth:
        """Check database connectivity, reusing a result for cache_ttl_seconds.

        Uses Django's ensure_connection() to validate the socket without
        running a query.
        """
        current_time = time.time()
        if (
            self._db_health_cache is not None
            and (current_time - self._db_health_cache_time) < self.cache_ttl_seconds
        ):
            return self._db_health_cache

        start_time = time.perf_counter()
        try:
            connection.ensure_connection()
            new_health = DependencyHealth(
                healthy=True,
                status=HealthStatus.HEALTHY,
                message="Database connection successful",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )
            if self._db_health_cache is not None and not self._db_health_cache.healthy:
                logger.info("database_connection_recovered")
        except OperationalError as e:
            new_health = DependencyHealth(
                healthy=False,
                status=HealthStatus.UNHEALTHY,
                message=f"Database connection failed: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )
            logger.warning("database_health_check_failed", error=str(e))
        except Exception as e:
            new_health = DependencyHealth(
                healthy=False,
                status=HealthStatus.ERROR,
                message=f"Unexpected error checking database: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )
            logger.error("database_health_check_error", error=str(e))

        self._db_health_cache = new_health
        self._db_health_cache_time = current_time
        return new_health

    def check_redis_health(self) -> DependencyHealth:
        """Check Redis connectivity with PING, cached like the database probe."""
        current_time = time.time()
        if (
            self._redis_health_cache is not None
            and (current_time - self._redis_health_cache_time) < self.cache_ttl_seconds
        ):
            return self._redis_health_cache

        start_time = time.perf_counter()
        try:
            if self.redis_client.ping():
                new_health = DependencyHealth(
                    healthy=True,
                    status=HealthStatus.HEALTHY,
                    message="Redis connection successful",
                    response_time_ms=(time.perf_counter() - start_time) * 1000,
                )
            else:
                new_health = DependencyHealth(
                    healthy=False,
                    status=HealthStatus.UNHEALTHY,
                    message="Redis health check failed: unexpected result",
                    response_time_ms=(time.perf_counter() - start_time) * 1000,
                )
        except redis.RedisError as e:
            new_health = DependencyHealth(
                healthy=False,
                status=HealthStatus.ERROR,
                message=f"Redis connection failed: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )
            logger.warning("redis_health_check_failed", error=str(e))

        self._redis_health_cache = new_health
        self._redis_health_cache_time = current_time
        return new_health


# Global health service instance
health_service = HealthService()
