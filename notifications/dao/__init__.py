"""Notification access layer."""

from notifications.dao.notification_dao import (
    AudienceTargeting,
    NotificationDAO,
    NotificationPage,
)

__all__ = ["AudienceTargeting", "NotificationDAO", "NotificationPage"]
