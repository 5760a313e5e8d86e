"""Readiness response schema."""

from pydantic import BaseModel, Field

from notifications.schemas.health.dependency_health import DependencyHealth


class ReadinessResponse(BaseModel):
    """Response model for readiness checks.

    A dependency outage marks the response degraded without taking the
    service out of rotation.
    """

    ready: bool = Field(..., description="Service can serve requests")
    status: str = Field(..., description="'ready' or 'degraded'")
    degraded: bool = Field(..., description="A non-critical dependency is down")
    dependencies: dict[str, DependencyHealth] = Field(
        ..., description="Status of each dependency"
    )
