"""Marketplace Location Engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geoengine.adapters.geocoder.nominatim_adapter import NominatimAdapter
from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.config import settings
from geoengine.infrastructure.api.routes_health import router as health_router
from geoengine.infrastructure.api.routes_location import router as location_router

logger = logging.getLogger(__name__)


def create_app(geocoder: GeocoderPort | None = None) -> FastAPI:
    """Build the app. Pass `geocoder` to replace the Nominatim client (tests, other providers)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One client per process: its rate limiter is the provider quota guard
        app.state.geocoder = geocoder if geocoder is not None else NominatimAdapter()
        logger.info("Geocoder ready: %s", type(app.state.geocoder).__name__)
        yield

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Marketplace Location Engine",
        description="Location enrichment, verification and proximity ranking",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api")
    app.include_router(location_router, prefix="/api")

    return app


app = create_app()
