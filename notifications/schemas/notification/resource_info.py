"""Schema for the resource a notification refers to."""

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from notifications.enums import ResourceContext
from notifications.schemas.base_schema_model import BaseSchemaModel


class ResourceInfo(BaseSchemaModel):
    """Reference to the entity a notification is about.

    The three known fields are typed; any extra keys (for example a
    ``display_name``) are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    resource_name: ResourceContext = Field(..., description="Resource context")
    resource_uid: str = Field(..., min_length=1, description="Public resource id")
    resource_id: str = Field(..., min_length=1, description="Internal resource id")

    @field_validator("resource_uid", "resource_id", mode="before")
    @classmethod
    def coerce_identifier(cls, value: Any) -> Any:
        """Accept integer and UUID identifiers by storing their string form."""
        if value is None or isinstance(value, str):
            return value
        return str(value)
