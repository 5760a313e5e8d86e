"""Django application configuration for notifications."""

from django.apps import AppConfig
from django.conf import settings


class NotificationsConfig(AppConfig):
    """Configuration class for the notifications application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"

    def ready(self) -> None:
        """Configure structured logging once the app registry is loaded."""
        if getattr(settings, "TEST_MODE", False):
            return

        from notifications.logging import setup_logging  # noqa: PLC0415

        setup_logging()
