"""FastAPI dependency injection — hands the app's geocoder to the use cases."""

from __future__ import annotations

from fastapi import Depends, Request

from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.application.use_cases.enrich_location import LocationEnrichmentOrchestrator
from geoengine.application.use_cases.verify_location import LocationVerifier
from geoengine.config import settings


def get_geocoder(request: Request) -> GeocoderPort:
    # Built once in the app lifespan so all requests share one rate limiter
    return request.app.state.geocoder


def get_enrichment_orchestrator(
    geocoder: GeocoderPort = Depends(get_geocoder),
) -> LocationEnrichmentOrchestrator:
    return LocationEnrichmentOrchestrator(geocoder, country_name=settings.geocoder_country_name)


def get_location_verifier(geocoder: GeocoderPort = Depends(get_geocoder)) -> LocationVerifier:
    return LocationVerifier(
        geocoder,
        verified_radius_km=settings.verification_radius_km,
        zero_confidence_km=settings.verification_zero_confidence_km,
    )
