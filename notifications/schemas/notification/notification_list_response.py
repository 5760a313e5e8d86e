"""Schema for paginated notification list response."""

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel
from notifications.schemas.notification.notification_detail import NotificationDetail


class NotificationListResponse(BaseSchemaModel):
    """Page of notifications visible to a user, with unread totals."""

    data: list[NotificationDetail] = Field(..., description="Notifications")
    total: int = Field(..., ge=0, description="Total matching notifications")
    unread_count: int = Field(..., ge=0, description="Unread visible notifications")
    skip: int = Field(..., ge=0, description="Rows skipped before this page")
    limit: int = Field(..., ge=1, description="Page size")
    has_more: bool = Field(..., description="Whether more rows follow this page")
