"""In-memory geocoder and canned results shared by the application and API tests."""

from __future__ import annotations

import asyncio

from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.domain.entities.address import StructuredAddress
from geoengine.domain.entities.geocoding import (
    EnrichmentResult,
    GeocodeResult,
    ProviderError,
)
from geoengine.domain.value_objects.coordinates import Coordinates
from geoengine.domain.value_objects.enums import ProviderErrorKind

ACCRA = Coordinates(latitude=5.6037, longitude=-0.1870)
KUMASI = Coordinates(latitude=6.6885, longitude=-1.6244)


def reverse_success(coords: Coordinates, city: str = "Accra", region: str = "Greater Accra Region") -> EnrichmentResult:
    address = StructuredAddress(
        region=region,
        city=city,
        district="Accra Metropolitan",
        locality="Osu",
        street_name="Oxford Street",
        coordinates=coords,
        is_verified=True,
    )
    return EnrichmentResult(
        success=True,
        address=address,
        coordinates=coords,
        raw_response={"display_name": f"Oxford Street, Osu, {city}, Ghana"},
    )


def geocode_success(coords: Coordinates, label: str = "Accra, Ghana") -> GeocodeResult:
    return GeocodeResult(success=True, coordinates=coords, display_label=label, confidence=0.6)


def geocode_failure(kind: ProviderErrorKind, message: str = "provider failure") -> GeocodeResult:
    return GeocodeResult.failure(ProviderError(kind, message))


def reverse_failure(kind: ProviderErrorKind, message: str = "provider failure") -> EnrichmentResult:
    return EnrichmentResult.failure(ProviderError(kind, message))


NOT_FOUND = geocode_failure(ProviderErrorKind.NO_DATA, "not found")
NO_ADDRESS = reverse_failure(ProviderErrorKind.NO_DATA, "No address data returned from provider")
CANCELLED = ProviderError(ProviderErrorKind.CANCELLED, "Request cancelled by deadline")


class FakeGeocoder(GeocoderPort):
    """In-memory GeocoderPort: unknown queries and points resolve to NO_DATA.

    Set `delay` to make every call take that long; a call whose `timeout`
    is shorter gives up after `timeout` seconds with CANCELLED, like the
    real adapter.
    """

    def __init__(self, delay: float = 0.0):
        self.geocode_results: dict[str, GeocodeResult] = {}
        self.reverse_results: dict[Coordinates, EnrichmentResult] = {}
        self.nearby_results: list[GeocodeResult] = []
        self.place_results: dict[str, EnrichmentResult] = {}
        self.calls: list[tuple] = []
        self.timeouts: list[float | None] = []
        self.delay = delay

    async def reverse_geocode(self, coords, *, timeout=None):
        self.calls.append(("reverse", coords))
        if await self._expired(timeout):
            return EnrichmentResult.failure(CANCELLED)
        return self.reverse_results.get(coords, NO_ADDRESS)

    async def geocode(self, query, country_filter=None, *, timeout=None):
        self.calls.append(("geocode", query))
        if await self._expired(timeout):
            return GeocodeResult.failure(CANCELLED)
        return self.geocode_results.get(query, NOT_FOUND)

    async def search_nearby(self, center, query, radius_km=5.0, *, timeout=None):
        self.calls.append(("nearby", center, query, radius_km))
        if await self._expired(timeout):
            return []
        return list(self.nearby_results)

    async def batch_geocode(self, queries, *, timeout=None):
        return {q: await self.geocode(q, timeout=timeout) for q in dict.fromkeys(queries)}

    async def lookup_place(self, kind, osm_id, *, timeout=None):
        self.calls.append(("lookup", kind, osm_id))
        if await self._expired(timeout):
            return EnrichmentResult.failure(CANCELLED)
        return self.place_results.get(f"{kind.value}{osm_id}", NO_ADDRESS)

    def health_check(self):
        return {"healthy": True, "request_count": len(self.calls)}

    async def _expired(self, timeout: float | None) -> bool:
        self.timeouts.append(timeout)
        if not self.delay:
            return False
        if timeout is not None and timeout < self.delay:
            await asyncio.sleep(timeout)
            return True
        await asyncio.sleep(self.delay)
        return False
