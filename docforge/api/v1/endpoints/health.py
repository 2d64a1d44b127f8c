"""Health check API endpoints."""

from typing import Dict

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from docforge.core.config import settings
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Health check status")
    version: str = Field(..., description="Running application version")
    service: str = Field(..., description="Service name")
    database: str = Field(..., description="Database health")
    providers: Dict[str, bool] = Field(default_factory=dict, description="Configured LLM providers")


@router.get(
    "",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check if the service is running and healthy",
    operation_id="get_service_health_status",
)
async def health_check(request: Request) -> HealthCheckResponse:
    """Health check endpoint."""
    db_health = await request.app.state.database.health_check()
    gateway = request.app.state.gateway
    providers = {
        name: gateway.has_provider(name) for name in sorted(set(settings.llm.stage_providers.values()))
    }

    return HealthCheckResponse(
        status="healthy" if db_health["status"] == "healthy" else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        database=db_health["status"],
        providers=providers,
    )
