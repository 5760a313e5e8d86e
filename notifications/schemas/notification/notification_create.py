"""Schema for creating a notification."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from notifications.enums import NotificationPriority, NotificationType, RecipientType
from notifications.schemas.base_schema_model import BaseSchemaModel
from notifications.schemas.notification.resource_info import ResourceInfo


class NotificationCreate(BaseSchemaModel):
    """Producer-supplied data for a new notification.

    ``recipient`` must be present for individual notifications and absent
    for announcements. ``expires_at`` is optional; the access layer applies
    the configured default when it is missing.
    """

    cuid: str = Field(..., min_length=1, max_length=64, description="Tenant id")
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=500)
    notification_type: NotificationType = Field(..., alias="type")
    recipient_type: RecipientType = Field(
        RecipientType.INDIVIDUAL, validate_default=True
    )
    recipient: str | None = Field(None, max_length=64)
    priority: NotificationPriority = Field(
        NotificationPriority.MEDIUM, validate_default=True
    )
    resource_info: ResourceInfo | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    action_url: str | None = Field(None, max_length=2048)
    author: str | None = Field(None, max_length=64)
    target_roles: list[str] | None = None
    target_vendor: str | None = Field(None, max_length=64)
    expires_at: datetime | None = None

    @field_validator("recipient", "author", mode="before")
    @classmethod
    def coerce_user_reference(cls, value: Any) -> Any:
        """Store user references (int, UUID or str) as strings."""
        if value is None or isinstance(value, str):
            return value or None
        return str(value)

    @field_validator("target_roles")
    @classmethod
    def drop_empty_roles(cls, value: list[str] | None) -> list[str] | None:
        """An empty role list means the announcement is not narrowed."""
        return value or None

    @model_validator(mode="after")
    def check_recipient_matches_type(self) -> "NotificationCreate":
        """Enforce that recipient is present iff the notification is individual."""
        if self.recipient_type == RecipientType.INDIVIDUAL.value and not self.recipient:
            raise ValueError("recipient is required for individual notifications")
        if self.recipient_type == RecipientType.ANNOUNCEMENT.value and self.recipient:
            raise ValueError("recipient must be empty for announcement notifications")
        return self

    def to_record(self) -> dict[str, Any]:
        """Return the column values for the notification store."""
        record = self.model_dump(exclude={"resource_info"})
        record["resource_info"] = (
            self.resource_info.model_dump(mode="json") if self.resource_info else None
        )
        return record
