"""Runtime configuration for the notification store, access layer and fan-out.

Values come from the ``NOTIFICATIONS`` dict in Django settings. Components
receive a ``NotificationConfig`` through their constructor and only fall back
to :func:`get_notification_config` when none is passed.
"""

import re
from typing import Any

from django.conf import settings
from pydantic import BaseModel, Field, field_validator

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


class NotificationConfig(BaseModel):
    """Tunables for notification expiry, retention, fan-out and paging."""

    default_expiry_days: int = Field(30, ge=1)
    cleanup_retention_days: int = Field(30, ge=0)
    channel_ttl_seconds: int = Field(7200, ge=1)
    tenant_id_pattern: str = r"^[A-Za-z0-9]{6,32}$"
    redis_url: str = DEFAULT_REDIS_URL
    cleanup_cron: str = "0 3 * * *"
    expiry_purge_cron: str = "30 3 * * *"
    default_page_size: int = Field(20, ge=1)
    max_page_size: int = Field(100, ge=1)

    @field_validator("tenant_id_pattern")
    @classmethod
    def validate_pattern(cls, value: str) -> str:
        """Fail at startup instead of on the first cache call."""
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid tenant_id_pattern: {exc}") from exc
        return value

    def is_valid_tenant_id(self, cuid: Any) -> bool:
        """Return True when ``cuid`` is a string in the accepted format."""
        if not isinstance(cuid, str):
            return False
        return re.fullmatch(self.tenant_id_pattern, cuid) is not None

    @classmethod
    def from_settings(cls) -> "NotificationConfig":
        """Build the configuration from Django settings."""
        values = dict(getattr(settings, "NOTIFICATIONS", {}) or {})
        values.setdefault(
            "redis_url", getattr(settings, "REDIS_URL", DEFAULT_REDIS_URL)
        )
        return cls(**values)


def get_notification_config() -> NotificationConfig:
    """Return a configuration built from the current Django settings."""
    return NotificationConfig.from_settings()
