"""Location endpoints — enrichment, verification, geocoding and proximity ranking."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path

from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.application.use_cases.enrich_location import (
    EnrichmentRequest,
    LocationEnrichmentOrchestrator,
)
from geoengine.application.use_cases.verify_location import LocationVerifier
from geoengine.config import settings
from geoengine.domain.geo_math import distance_km, format_distance
from geoengine.domain.policies.proximity import find_nearest
from geoengine.domain.value_objects.enums import OsmType, ProviderErrorKind
from geoengine.infrastructure.api.dependencies import (
    get_enrichment_orchestrator,
    get_geocoder,
    get_location_verifier,
)
from geoengine.infrastructure.api.schemas import (
    BatchGeocodeIn,
    CalculateDistanceIn,
    CandidateIn,
    CoordinatesIn,
    EnrichLocationIn,
    GeocodeIn,
    NearestIn,
    SearchNearbyIn,
    VerifyLocationIn,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/location", tags=["location"])

_STATUS_BY_KIND = {
    ProviderErrorKind.INVALID_INPUT: 400,
    ProviderErrorKind.NO_DATA: 404,
    ProviderErrorKind.RATE_LIMITED: 429,
    ProviderErrorKind.CANCELLED: 504,
}


def _raise_for(kind: ProviderErrorKind | None, message: str | None) -> None:
    status = _STATUS_BY_KIND.get(kind, 502)
    raise HTTPException(status_code=status, detail=message or "Geocoding provider error")


@router.post("/enrich")
async def enrich_location(
    body: EnrichLocationIn,
    orchestrator: LocationEnrichmentOrchestrator = Depends(get_enrichment_orchestrator),
):
    """Build a structured address from a postal code, coordinates and/or landmark."""
    result = await orchestrator.enrich(
        EnrichmentRequest(
            postal_code=body.postal_code,
            coordinates=body.coordinates.to_domain() if body.coordinates else None,
            landmark=body.landmark,
        )
    )
    if not result.success:
        _raise_for(result.error_kind, result.error)

    return {
        "success": True,
        "message": "Location data enriched successfully",
        "data": result.address.to_dict(),
    }


@router.post("/verify")
async def verify_location(
    body: VerifyLocationIn,
    verifier: LocationVerifier = Depends(get_location_verifier),
):
    """Check claimed coordinates against the geocoded postal code."""
    result = await verifier.verify(body.postal_code, body.coordinates.to_domain())
    data = result.to_dict()
    data["message"] = (
        "Location verified successfully"
        if result.verified
        else "Location verification failed. Coordinates don't match the postal code."
    )
    return {"success": True, "data": data}


@router.post("/geocode")
async def geocode_address(body: GeocodeIn, geocoder: GeocoderPort = Depends(get_geocoder)):
    result = await geocoder.geocode(body.address, body.country_code)
    if not result.success:
        _raise_for(result.error_kind, result.error)
    return {
        "success": True,
        "data": {
            "coordinates": result.coordinates.to_dict(),
            "display_label": result.display_label,
            "confidence": result.confidence,
        },
    }


@router.post("/reverse-geocode")
async def reverse_geocode(body: CoordinatesIn, geocoder: GeocoderPort = Depends(get_geocoder)):
    result = await geocoder.reverse_geocode(body.to_domain())
    if not result.success:
        _raise_for(result.error_kind, result.error)
    return {
        "success": True,
        "data": {
            "address": result.address.to_dict(),
            "coordinates": result.coordinates.to_dict(),
            "display_label": (result.raw_response or {}).get("display_name"),
        },
    }


@router.post("/search-nearby")
async def search_nearby(body: SearchNearbyIn, geocoder: GeocoderPort = Depends(get_geocoder)):
    results = await geocoder.search_nearby(body.to_domain(), body.query, body.radius_km)
    return {
        "success": True,
        "data": [r.to_dict() for r in results],
        "count": len(results),
    }


@router.post("/calculate-distance")
async def calculate_distance(body: CalculateDistanceIn):
    d = distance_km(body.from_.to_domain(), body.to.to_domain())
    return {
        "success": True,
        "data": {
            "distance_km": d,
            "distance_label": format_distance(d),
            "from": body.from_.model_dump(),
            "to": body.to.model_dump(),
        },
    }


@router.post("/batch-geocode")
async def batch_geocode(body: BatchGeocodeIn, geocoder: GeocoderPort = Depends(get_geocoder)):
    if len(body.addresses) > settings.batch_geocode_max_queries:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.batch_geocode_max_queries} addresses can be geocoded at once",
        )
    results = await geocoder.batch_geocode(body.addresses)
    return {
        "success": True,
        "data": {query: r.to_dict() for query, r in results.items()},
        "count": len(results),
    }


@router.get("/place/{osm_type}/{osm_id}")
async def get_place_details(
    osm_type: OsmType,
    osm_id: int = Path(gt=0),
    geocoder: GeocoderPort = Depends(get_geocoder),
):
    result = await geocoder.lookup_place(osm_type, osm_id)
    if not result.success:
        _raise_for(result.error_kind, result.error)
    return {"success": True, "data": result.to_dict(include_raw=True)}


@router.post("/nearest")
async def find_nearest_entities(body: NearestIn):
    """Rank caller-supplied candidates by distance from the origin."""
    max_distance = (
        body.max_distance_km
        if body.max_distance_km is not None
        else settings.proximity_default_max_distance_km
    )
    limit = body.limit if body.limit is not None else settings.proximity_default_limit

    matches = find_nearest(
        body.origin.to_domain(),
        body.candidates,
        _candidate_coordinates,
        max_distance_km=max_distance,
        limit=limit,
    )
    logger.info(
        "Nearest search: %d/%d candidates within %.1f km",
        len(matches), len(body.candidates), max_distance,
    )
    return {
        "success": True,
        "data": [
            {
                "entity": m.entity.model_dump(),
                "distance_km": round(m.distance_km, 3),
                "distance_label": m.distance_label,
            }
            for m in matches
        ],
        "count": len(matches),
    }


def _candidate_coordinates(candidate: CandidateIn):
    return candidate.coordinates.to_domain() if candidate.coordinates else None
