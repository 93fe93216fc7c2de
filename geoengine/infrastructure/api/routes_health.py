"""Health check endpoint."""

from fastapi import APIRouter, Depends

from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.infrastructure.api.dependencies import get_geocoder

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(geocoder: GeocoderPort = Depends(get_geocoder)):
    """Report service status and geocoder usage statistics."""
    geocoder_status = geocoder.health_check()
    return {
        "status": "ok" if geocoder_status.get("healthy") else "degraded",
        "geocoder": geocoder_status,
        "service": "Marketplace Location Engine",
    }
