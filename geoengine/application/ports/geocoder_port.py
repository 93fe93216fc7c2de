"""Port interface for the external geocoding provider."""

from abc import ABC, abstractmethod

from geoengine.domain.entities.geocoding import EnrichmentResult, GeocodeResult
from geoengine.domain.value_objects.coordinates import Coordinates
from geoengine.domain.value_objects.enums import OsmType


class GeocoderPort(ABC):
    """Every method returns a result value; provider failures never raise."""

    @abstractmethod
    async def reverse_geocode(
        self, coords: Coordinates, *, timeout: float | None = None
    ) -> EnrichmentResult:
        """Resolve coordinates to a structured address."""
        ...

    @abstractmethod
    async def geocode(
        self,
        query: str,
        country_filter: str | None = None,
        *,
        timeout: float | None = None,
    ) -> GeocodeResult:
        """Forward-geocode free text to its single best match."""
        ...

    @abstractmethod
    async def search_nearby(
        self,
        center: Coordinates,
        query: str,
        radius_km: float = 5.0,
        *,
        timeout: float | None = None,
    ) -> list[GeocodeResult]:
        """Best-effort text search inside a viewport; [] on any failure."""
        ...

    @abstractmethod
    async def batch_geocode(
        self, queries: list[str], *, timeout: float | None = None
    ) -> dict[str, GeocodeResult]:
        """Geocode each query in turn; every distinct query gets an entry."""
        ...

    @abstractmethod
    async def lookup_place(
        self, kind: OsmType, osm_id: int, *, timeout: float | None = None
    ) -> EnrichmentResult:
        """Fetch a place by its OpenStreetMap element id."""
        ...

    def health_check(self) -> dict:
        """Report usage statistics; adapters override with real figures."""
        return {"healthy": True}
