"""Enumerations for the notifications app."""

from notifications.enums.health_status import HealthStatus
from notifications.enums.notification import (
    AnnouncementChannel,
    NotificationPriority,
    NotificationType,
    RecipientType,
    ResourceContext,
)

__all__ = [
    "AnnouncementChannel",
    "HealthStatus",
    "NotificationPriority",
    "NotificationType",
    "RecipientType",
    "ResourceContext",
]
