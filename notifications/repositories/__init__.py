"""Data-access repositories for the notifications app."""

from notifications.repositories.notification_store import NotificationStore, QuerySpec

__all__ = ["NotificationStore", "QuerySpec"]
