"""Liveness endpoint served outside the API prefix."""

from __future__ import annotations

from fastapi import APIRouter

from ...deps import SettingsDependency
from ...models import utcnow
from ...schemas import Envelope, HealthCheckResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=Envelope[HealthCheckResponse],
    summary="Report service health",
)
async def health_check(settings: SettingsDependency) -> Envelope[HealthCheckResponse]:
    return Envelope[HealthCheckResponse](
        message="TaskFlow API is running",
        data=HealthCheckResponse(timestamp=utcnow(), storage_backend=settings.storage_backend),
    )
