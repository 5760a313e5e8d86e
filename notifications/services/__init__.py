"""Services for the notifications app."""

from notifications.services.health_service import HealthService, health_service
from notifications.services.notification_service import NotificationService

__all__ = ["HealthService", "NotificationService", "health_service"]
