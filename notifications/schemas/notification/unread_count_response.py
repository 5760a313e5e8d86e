"""Schema for unread count response."""

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class UnreadCountResponse(BaseSchemaModel):
    """Unread total plus a zero-filled breakdown by notification type."""

    count: int = Field(..., ge=0, description="Unread visible notifications")
    by_type: dict[str, int] = Field(..., description="Unread count per type")
