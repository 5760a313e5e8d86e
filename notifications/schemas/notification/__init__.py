"""Notification schemas."""

from notifications.schemas.notification.notification_create import NotificationCreate
from notifications.schemas.notification.notification_detail import NotificationDetail
from notifications.schemas.notification.notification_filters import (
    NotificationFilters,
)
from notifications.schemas.notification.notification_list_response import (
    NotificationListResponse,
)
from notifications.schemas.notification.notification_update import (
    NotificationUpdate,
)
from notifications.schemas.notification.pagination_query import (
    DEFAULT_SORT,
    SORTABLE_FIELDS,
    PaginationQuery,
)
from notifications.schemas.notification.resource_info import ResourceInfo
from notifications.schemas.notification.unread_count_response import (
    UnreadCountResponse,
)

__all__ = [
    "DEFAULT_SORT",
    "SORTABLE_FIELDS",
    "NotificationCreate",
    "NotificationDetail",
    "NotificationFilters",
    "NotificationListResponse",
    "NotificationUpdate",
    "PaginationQuery",
    "ResourceInfo",
    "UnreadCountResponse",
]
