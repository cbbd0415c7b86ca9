"""Health check API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from illustration_ai.config import Settings, get_settings
from illustration_ai.models.response.illustration import HealthCheckResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check if the service is running and which collaborators are configured",
    operation_id="get_service_health_status",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthCheckResponse:
    return HealthCheckResponse(
        status="healthy" if settings.anthropic.configured else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        templates_enabled=settings.supabase.configured,
    )
