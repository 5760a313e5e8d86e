"""Schema for filtering notification listings and counts."""

from datetime import datetime

from pydantic import Field, field_validator

from notifications.enums import NotificationPriority, NotificationType, ResourceContext
from notifications.schemas.base_schema_model import BaseSchemaModel


class NotificationFilters(BaseSchemaModel):
    """Optional constraints applied on top of the visibility rule.

    ``notification_type`` and ``priority`` accept a single value or a list;
    a list matches any of its members.
    """

    notification_type: NotificationType | list[NotificationType] | None = Field(
        None, alias="type", description="Notification type or list of types"
    )
    is_read: bool | None = Field(None, description="Read state")
    priority: NotificationPriority | list[NotificationPriority] | None = Field(
        None, description="Priority or list of priorities"
    )
    resource_name: ResourceContext | None = Field(
        None, description="Resource context the notification refers to"
    )
    resource_id: str | None = Field(None, description="Referenced resource id")
    date_from: datetime | None = Field(None, description="Created at or after")
    date_to: datetime | None = Field(None, description="Created at or before")

    @field_validator("resource_id", mode="before")
    @classmethod
    def coerce_resource_id(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)
