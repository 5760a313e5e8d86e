"""Schema for updating a stored notification."""

from datetime import datetime
from typing import Any

from pydantic import Field

from notifications.enums import NotificationPriority
from notifications.schemas.base_schema_model import BaseSchemaModel


class NotificationUpdate(BaseSchemaModel):
    """Mutable notification fields; unset fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=200)
    message: str | None = Field(None, min_length=1, max_length=500)
    priority: NotificationPriority | None = None
    metadata: dict[str, Any] | None = None
    action_url: str | None = Field(None, max_length=2048)
    expires_at: datetime | None = None
    is_read: bool | None = None
