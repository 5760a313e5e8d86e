"""Base pydantic model shared by notification and fan-out schemas."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchemaModel(BaseModel):
    """Base pydantic model for schema definitions.

    Accepts both snake_case field names and camelCase aliases, so producers
    may send ``recipientType`` or ``recipient_type`` alike. Enum fields hold
    their plain string values.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
        str_strip_whitespace=True,
    )
