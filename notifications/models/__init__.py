"""Database models for the notifications app."""

from notifications.models.notification import Notification

__all__ = ["Notification"]
