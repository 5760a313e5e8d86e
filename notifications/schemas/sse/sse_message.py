"""Schema for messages published to notification channels."""

from datetime import UTC, datetime
from typing import Any

from pydantic import Field

from notifications.lifecycle import generate_nuid
from notifications.schemas.base_schema_model import BaseSchemaModel


class SSEMessage(BaseSchemaModel):
    """Envelope pushed to subscribers of a channel."""

    id: str = Field(default_factory=lambda: generate_nuid(32))
    event: str = Field(..., min_length=1, description="Event name")
    data: Any = Field(None, description="JSON-serializable payload")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
