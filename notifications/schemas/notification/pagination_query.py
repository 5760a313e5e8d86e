"""Schema for notification list pagination."""

from pydantic import Field, field_validator

from notifications.schemas.base_schema_model import BaseSchemaModel

SORTABLE_FIELDS = frozenset(
    {
        "created_at",
        "updated_at",
        "expires_at",
        "read_at",
        "priority",
        "notification_type",
        "is_read",
        "title",
    }
)
DEFAULT_SORT = "-created_at"


class PaginationQuery(BaseSchemaModel):
    """Skip/page, limit and sort options for notification listings.

    ``skip`` wins over ``page`` when both are given. ``sort_by`` is a field
    name, prefixed with ``-`` for descending order.
    """

    skip: int | None = Field(None, ge=0, description="Number of rows to skip")
    page: int | None = Field(None, ge=1, description="1-based page number")
    limit: int = Field(20, ge=1, le=100, description="Page size")
    sort_by: str = Field(DEFAULT_SORT, description="Sort field")

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, value: str) -> str:
        """Reject sort keys outside the indexed, user-facing columns."""
        field_name = value.lstrip("-")
        if field_name not in SORTABLE_FIELDS:
            raise ValueError(
                f"sort_by must be one of: {', '.join(sorted(SORTABLE_FIELDS))}"
            )
        return value

    @property
    def offset(self) -> int:
        """Number of rows to skip before the page starts."""
        if self.skip is not None:
            return self.skip
        if self.page is not None:
            return (self.page - 1) * self.limit
        return 0
