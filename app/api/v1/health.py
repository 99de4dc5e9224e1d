"""Health check endpoints."""

from fastapi import APIRouter

from app.dependencies import AppSettings
from app.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: AppSettings) -> HealthResponse:
    """Liveness check: is the process running?"""
    return HealthResponse(
        service=settings.app_name,
        version=settings.app_version,
        env=settings.environment,
    )

