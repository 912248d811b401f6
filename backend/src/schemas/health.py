"""Health check schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ServiceStatus(BaseModel):
    """Status of a dependency the API needs to serve reports."""

    status: Literal["healthy", "unhealthy"]
    message: str
    details: dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"]
    version: str
    services: dict[str, ServiceStatus]
    timestamp: str = Field(..., description="UTC ISO-8601 timestamp")
