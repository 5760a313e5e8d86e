"""Structured result returned by every cache operation."""

from typing import Any

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class CacheResult(BaseSchemaModel):
    """Outcome of a cache call; cache methods return this instead of raising."""

    success: bool = Field(..., description="Whether the operation succeeded")
    data: Any = Field(None, description="Operation result on success")
    error: str | None = Field(None, description="Failure reason")

    @classmethod
    def ok(cls, data: Any = None) -> "CacheResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "CacheResult":
        return cls(success=False, error=error)
