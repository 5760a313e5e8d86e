"""Pydantic schemas for the notifications app."""

from notifications.schemas.base_schema_model import BaseSchemaModel
from notifications.schemas.health import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)
from notifications.schemas.notification import (
    NotificationCreate,
    NotificationDetail,
    NotificationFilters,
    NotificationListResponse,
    NotificationUpdate,
    PaginationQuery,
    ResourceInfo,
    UnreadCountResponse,
)
from notifications.schemas.sse import CacheResult, SSEMessage

__all__ = [
    "BaseSchemaModel",
    "CacheResult",
    "DependencyHealth",
    "LivenessResponse",
    "NotificationCreate",
    "NotificationDetail",
    "NotificationFilters",
    "NotificationListResponse",
    "NotificationUpdate",
    "PaginationQuery",
    "ReadinessResponse",
    "ResourceInfo",
    "SSEMessage",
    "UnreadCountResponse",
]
