"""Common system-level response models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .envelope import ApiModel
from .user import UserPublic


class RootResponse(ApiModel):
    """Service metadata, plus the caller when a valid token was sent."""

    name: str = Field(description="Human-friendly service name")
    environment: str = Field(description="Deployment environment identifier")
    version: str = Field(description="Semantic version of the service")
    api_prefix: str = Field(description="Base path for API routes")
    viewer: UserPublic | None = Field(default=None, description="Authenticated caller, if any")


class HealthCheckResponse(ApiModel):
    status: str = Field(default="ok", description="Service health indicator")
    timestamp: datetime
    storage_backend: str


__all__ = ["HealthCheckResponse", "RootResponse"]
