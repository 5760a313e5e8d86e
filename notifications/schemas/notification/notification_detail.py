"""Schema for notification details."""

from datetime import datetime
from typing import Any

from django.utils import timezone
from pydantic import Field

from notifications.lifecycle import is_expired, time_ago
from notifications.schemas.base_schema_model import BaseSchemaModel


class NotificationDetail(BaseSchemaModel):
    """Serialized notification as returned to consumers and pushed to channels.

    ``is_expired`` and ``time_ago`` are computed at serialization time from
    the stored timestamps.
    """

    nuid: str = Field(..., description="Public notification identifier")
    cuid: str = Field(..., description="Tenant identifier")
    recipient_type: str = Field(..., description="individual or announcement")
    recipient: str | None = Field(None, description="Recipient user id")
    target_roles: list[str] | None = Field(None, description="Targeted roles")
    target_vendor: str | None = Field(None, description="Targeted vendor")
    title: str = Field(..., description="Notification title")
    message: str = Field(..., description="Notification body")
    notification_type: str = Field(..., alias="type", description="Notification type")
    priority: str = Field(..., description="Notification priority")
    resource_info: dict[str, Any] | None = Field(
        None, description="Referenced resource"
    )
    is_read: bool = Field(..., description="Whether the notification has been read")
    read_at: datetime | None = Field(None, description="When it was first read")
    action_url: str | None = Field(None, description="Deep link")
    metadata: dict[str, Any] = Field(default_factory=dict)
    author: str | None = Field(None, description="Originating user id")
    expires_at: datetime = Field(..., description="Purge eligibility timestamp")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    is_expired: bool = Field(..., description="Whether expires_at has passed")
    time_ago: str = Field(..., description="Human-relative age")

    @classmethod
    def from_notification(
        cls, notification: Any, now: datetime | None = None
    ) -> "NotificationDetail":
        """Build the detail view of a stored notification."""
        now = now or timezone.now()
        return cls(
            nuid=notification.nuid,
            cuid=notification.cuid,
            recipient_type=notification.recipient_type,
            recipient=notification.recipient,
            target_roles=notification.target_roles,
            target_vendor=notification.target_vendor,
            title=notification.title,
            message=notification.message,
            notification_type=notification.notification_type,
            priority=notification.priority,
            resource_info=notification.resource_info,
            is_read=notification.is_read,
            read_at=notification.read_at,
            action_url=notification.action_url,
            metadata=notification.metadata or {},
            author=notification.author,
            expires_at=notification.expires_at,
            created_at=notification.created_at,
            updated_at=notification.updated_at,
            is_expired=is_expired(notification.expires_at, now),
            time_ago=time_ago(notification.created_at, now),
        )
