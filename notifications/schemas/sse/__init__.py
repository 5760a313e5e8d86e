"""Channel fan-out schemas."""

from notifications.schemas.sse.cache_result import CacheResult
from notifications.schemas.sse.sse_message import SSEMessage

__all__ = ["CacheResult", "SSEMessage"]
