"""Health check endpoints."""

from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])

API_VERSION = "0.1.0"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    geocoding_providers: Dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(container: ServiceContainer = Depends(get_service_container)) -> HealthResponse:
    """Check service health and geocoding providers.

    Returns:
        Registered geocoding providers and whether each one is active
    """
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        geocoding_providers=container.geocoder_factory.list_providers(),
    )
