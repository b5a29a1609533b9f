from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from trends_gateway import __version__
from trends_gateway.api.dependencies import get_app_settings
from trends_gateway.core.config import Settings
from trends_gateway.core.logging import get_logger

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)

STATUS_TEXT = "Google Trends API is running ✅"


class HealthStatus(BaseModel):
    """Basic health status response model."""
    status: str
    version: str = __version__
    service: str


@health_router.get(
    "/",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness text",
    description="Returns a static status line.",
)
async def get_status_text() -> str:
    return STATUS_TEXT


@health_router.get(
    "/health",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic health status of the service.",
)
async def get_health(settings: Settings = Depends(get_app_settings)) -> HealthStatus:
    """
    Basic health check endpoint.

    Returns:
        HealthStatus: Basic service health status
    """
    logger.debug("Health check requested")
    return HealthStatus(status="ok", service=settings.PROJECT_NAME)
