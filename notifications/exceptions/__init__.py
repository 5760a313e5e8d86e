"""Exception handling utilities for the notification hub."""

from notifications.exceptions.handlers import custom_exception_handler
from notifications.exceptions.notification_exceptions import (
    NotificationError,
    NotificationNotFoundError,
    NotificationValidationError,
    SerializationError,
    StoreError,
    TenantValidationError,
)

__all__ = [
    "NotificationError",
    "NotificationNotFoundError",
    "NotificationValidationError",
    "SerializationError",
    "StoreError",
    "TenantValidationError",
    "custom_exception_handler",
]
