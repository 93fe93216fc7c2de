"""Request bodies for the location endpoints.

Range checks live here so malformed coordinates are rejected (422) before
any geocoder call is queued behind the rate limiter.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from geoengine.domain.value_objects.coordinates import Coordinates


class CoordinatesIn(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_domain(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class EnrichLocationIn(BaseModel):
    postal_code: str = Field(min_length=1, description="GhanaPost GPS-style address code")
    coordinates: CoordinatesIn | None = None
    landmark: str | None = None


class VerifyLocationIn(BaseModel):
    postal_code: str = Field(min_length=1)
    coordinates: CoordinatesIn


class GeocodeIn(BaseModel):
    address: str = Field(min_length=1)
    country_code: str | None = None


class SearchNearbyIn(CoordinatesIn):
    query: str = Field(min_length=1)
    radius_km: float = Field(default=5.0, ge=0, le=500)


class CalculateDistanceIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: CoordinatesIn = Field(alias="from")
    to: CoordinatesIn


class BatchGeocodeIn(BaseModel):
    addresses: list[str] = Field(min_length=1)


class CandidateIn(BaseModel):
    """A marketplace entity (provider, client) as fetched by the caller."""

    model_config = ConfigDict(extra="allow")

    id: str
    coordinates: CoordinatesIn | None = None


class NearestIn(BaseModel):
    origin: CoordinatesIn
    candidates: list[CandidateIn]
    max_distance_km: float | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)
