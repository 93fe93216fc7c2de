"""Nominatim geocoder adapter — implements GeocoderPort with process-wide pacing."""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any

import httpx

from geoengine.adapters.geocoder.rate_limiter import RateLimiter
from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.config import settings
from geoengine.domain.entities.address import StructuredAddress
from geoengine.domain.entities.geocoding import (
    EnrichmentResult,
    GeocodeResult,
    ProviderError,
)
from geoengine.domain.geo_math import bounding_box
from geoengine.domain.value_objects.coordinates import Coordinates
from geoengine.domain.value_objects.enums import OsmType, ProviderErrorKind, SourceProvider

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please wait before making more requests."
FORBIDDEN_MESSAGE = "Access denied. Check the User-Agent and Referer headers."
NOT_FOUND_MESSAGE = "not found"


class NominatimAdapter(GeocoderPort):
    """Rate-limited client for a Nominatim-compatible geocoding API.

    One instance owns one RateLimiter; every operation draws from it, so
    build a single adapter per process and inject it where needed.
    429 responses are surfaced, not retried.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        referer: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        min_interval_ms: int | None = None,
        country_code: str | None = None,
        accept_language: str | None = None,
        nearby_limit: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._user_agent = (user_agent if user_agent is not None else settings.geocoder_user_agent).strip()
        self._referer = (referer if referer is not None else settings.geocoder_referer).strip()
        if not self._user_agent:
            raise ValueError("A client identifier (User-Agent) is required for the geocoding provider")
        if not self._referer:
            raise ValueError("A contact/referrer URL (Referer) is required for the geocoding provider")

        self._base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self._country_code = country_code if country_code is not None else settings.geocoder_country_code
        self._accept_language = accept_language or settings.geocoder_accept_language
        self._nearby_limit = nearby_limit or settings.nearby_search_limit
        self._transport = transport
        self._limiter = RateLimiter(
            min_interval_ms if min_interval_ms is not None else settings.geocoder_min_interval_ms
        )

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._limiter

    # ── Public API ────────────────────────────────────────────────

    async def reverse_geocode(
        self, coords: Coordinates, *, timeout: float | None = None
    ) -> EnrichmentResult:
        problem = coords.validation_error()
        if problem:
            logger.warning("Rejected reverse geocode input: %s", problem)
            return EnrichmentResult.failure(ProviderError.invalid_input(problem))

        payload, err = await self._get_json(
            "/reverse",
            {
                "lat": coords.latitude,
                "lon": coords.longitude,
                "format": "json",
                "addressdetails": 1,
                "zoom": 18,
            },
            timeout,
        )
        if err:
            return EnrichmentResult.failure(err)

        if not isinstance(payload, dict) or payload.get("error") or not payload.get("address"):
            logger.warning("No address data for (%f, %f)", coords.latitude, coords.longitude)
            return EnrichmentResult.failure(
                ProviderError(ProviderErrorKind.NO_DATA, "No address data returned from provider")
            )

        address = self._map_address(payload["address"], coords)
        logger.info(
            "Nominatim reverse (%f, %f) → region=%s, city=%s, district=%s",
            coords.latitude, coords.longitude, address.region, address.city, address.district,
        )
        return EnrichmentResult(success=True, address=address, coordinates=coords, raw_response=payload)

    async def geocode(
        self,
        query: str,
        country_filter: str | None = None,
        *,
        timeout: float | None = None,
    ) -> GeocodeResult:
        query = (query or "").strip()
        if not query:
            return GeocodeResult.failure(ProviderError.invalid_input("Query must not be empty"))

        params: dict[str, Any] = {"q": query, "format": "json", "addressdetails": 1, "limit": 1}
        countries = self._country_code if country_filter is None else country_filter
        if countries:
            params["countrycodes"] = countries

        payload, err = await self._get_json("/search", params, timeout)
        if err:
            return GeocodeResult.failure(err)

        if not isinstance(payload, list) or not payload:
            logger.warning("Nominatim returned no results for '%s'", query)
            return GeocodeResult.failure(ProviderError(ProviderErrorKind.NO_DATA, NOT_FOUND_MESSAGE))

        try:
            result = self._to_geocode_result(payload[0])
        except (KeyError, TypeError, ValueError):
            logger.exception("Unexpected search payload for '%s'", query)
            return GeocodeResult.failure(
                ProviderError(ProviderErrorKind.NO_DATA, "Malformed provider response")
            )

        logger.info(
            "Nominatim resolved '%s' → (%f, %f)",
            query, result.coordinates.latitude, result.coordinates.longitude,
        )
        return result

    async def search_nearby(
        self,
        center: Coordinates,
        query: str,
        radius_km: float = 5.0,
        *,
        timeout: float | None = None,
    ) -> list[GeocodeResult]:
        problem = center.validation_error()
        query = (query or "").strip()
        if problem or not query or not math.isfinite(radius_km) or radius_km < 0:
            logger.warning("Rejected nearby search input (center=%s, query=%r, radius=%s)", center, query, radius_km)
            return []

        box = bounding_box(center, radius_km)
        params: dict[str, Any] = {
            "q": query,
            "format": "json",
            "addressdetails": 1,
            "bounded": 1,
            "viewbox": box.to_viewbox(),
            "limit": self._nearby_limit,
        }
        if self._country_code:
            params["countrycodes"] = self._country_code

        payload, err = await self._get_json("/search", params, timeout)
        if err:
            logger.warning("Nearby search for '%s' failed: %s", query, err.message)
            return []
        if not isinstance(payload, list):
            return []

        results = []
        for item in payload:
            try:
                results.append(self._to_geocode_result(item))
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed nearby result: %r", item)
        return results

    async def batch_geocode(
        self, queries: list[str], *, timeout: float | None = None
    ) -> dict[str, GeocodeResult]:
        # Duplicates collapse to one call, first-seen order kept
        distinct = list(dict.fromkeys(queries))
        logger.info("Batch geocoding %d queries", len(distinct))

        results: dict[str, GeocodeResult] = {}
        for query in distinct:
            results[query] = await self.geocode(query, timeout=timeout)

        successful = sum(1 for r in results.values() if r.success)
        logger.info("Batch geocode complete: %d/%d resolved", successful, len(results))
        return results

    async def lookup_place(
        self, kind: OsmType | str, osm_id: int, *, timeout: float | None = None
    ) -> EnrichmentResult:
        try:
            kind = OsmType(kind)
        except ValueError:
            return EnrichmentResult.failure(
                ProviderError.invalid_input("OSM type must be 'N' (Node), 'W' (Way), or 'R' (Relation)")
            )
        if isinstance(osm_id, bool) or not isinstance(osm_id, int) or osm_id <= 0:
            return EnrichmentResult.failure(ProviderError.invalid_input("OSM ID must be a positive integer"))

        payload, err = await self._get_json(
            "/lookup",
            {"osm_ids": f"{kind.value}{osm_id}", "format": "json", "addressdetails": 1},
            timeout,
        )
        if err:
            return EnrichmentResult.failure(err)

        if not isinstance(payload, list) or not payload:
            logger.warning("Place %s%d not found", kind.value, osm_id)
            return EnrichmentResult.failure(ProviderError(ProviderErrorKind.NO_DATA, "Place not found"))

        data = payload[0]
        try:
            coords = Coordinates(latitude=float(data["lat"]), longitude=float(data["lon"]))
            if not coords.is_valid():
                raise ValueError(coords.validation_error())
            address = self._map_address(data.get("address") or {}, coords)
        except (KeyError, TypeError, ValueError):
            logger.exception("Unexpected lookup payload for %s%d", kind.value, osm_id)
            return EnrichmentResult.failure(
                ProviderError(ProviderErrorKind.NO_DATA, "Malformed provider response")
            )

        return EnrichmentResult(success=True, address=address, coordinates=coords, raw_response=data)

    def health_check(self) -> dict:
        state = self._limiter.state
        last = (
            datetime.fromtimestamp(state.last_request_wall, tz=timezone.utc).isoformat()
            if state.last_request_wall is not None
            else None
        )
        return {
            "healthy": True,
            "request_count": state.request_count,
            "last_request_at": last,
            "min_interval_ms": state.min_interval_ms,
        }

    # ── Private helpers ───────────────────────────────────────────

    async def _get_json(
        self, path: str, params: dict[str, Any], timeout: float | None
    ) -> tuple[Any, ProviderError | None]:
        """Run one paced request, bounded by the caller's deadline if given."""
        if timeout is None:
            return await self._send(path, params)
        try:
            return await asyncio.wait_for(self._send(path, params), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Geocoder call %s cancelled after %.2fs deadline", path, timeout)
            return None, ProviderError(
                ProviderErrorKind.CANCELLED, f"Request cancelled after {timeout}s deadline"
            )

    async def _send(self, path: str, params: dict[str, Any]) -> tuple[Any, ProviderError | None]:
        await self._limiter.acquire()
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("Nominatim %s timed out: %s", path, exc)
            return None, ProviderError(ProviderErrorKind.NETWORK, f"Request timed out: {exc}")
        except httpx.TransportError as exc:
            logger.warning("Nominatim %s network error: %s", path, exc)
            return None, ProviderError(ProviderErrorKind.NETWORK, f"Network error: {exc}")
        except httpx.DecodingError as exc:
            logger.warning("Nominatim %s returned an undecodable body: %s", path, exc)
            return None, ProviderError(ProviderErrorKind.NO_DATA, "Malformed provider response")
        except httpx.HTTPError as exc:
            logger.warning("Nominatim %s failed: %s", path, exc)
            return None, ProviderError(ProviderErrorKind.UNKNOWN, f"Provider request failed: {exc}")

        err = self._classify_status(response.status_code)
        if err:
            logger.warning("Nominatim %s returned HTTP %d", path, response.status_code)
            return None, err

        try:
            return response.json(), None
        except ValueError:
            logger.warning("Nominatim %s returned a non-JSON body", path)
            return None, ProviderError(ProviderErrorKind.NO_DATA, "Malformed provider response")

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._user_agent,
            "Referer": self._referer,
            "Accept": "application/json",
            "Accept-Language": self._accept_language,
        }

    @staticmethod
    def _classify_status(status: int) -> ProviderError | None:
        if 200 <= status < 300:
            return None
        if status == 429:
            return ProviderError(ProviderErrorKind.RATE_LIMITED, RATE_LIMITED_MESSAGE)
        if status == 403:
            return ProviderError(ProviderErrorKind.FORBIDDEN, FORBIDDEN_MESSAGE)
        return ProviderError(ProviderErrorKind.UNKNOWN, f"Provider returned HTTP {status}")

    @staticmethod
    def _to_geocode_result(item: dict[str, Any]) -> GeocodeResult:
        """Convert one /search hit. Raises KeyError/TypeError/ValueError if malformed."""
        coords = Coordinates(latitude=float(item["lat"]), longitude=float(item["lon"]))
        if not coords.is_valid():
            raise ValueError(coords.validation_error())

        importance = item.get("importance")
        confidence = None
        if importance is not None:
            confidence = min(1.0, max(0.0, float(importance)))

        return GeocodeResult(
            success=True,
            coordinates=coords,
            display_label=item.get("display_name"),
            raw_address_fields=item.get("address"),
            confidence=confidence,
        )

    @staticmethod
    def _map_address(fields: dict[str, Any], coords: Coordinates) -> StructuredAddress:
        """Map Nominatim's address block onto StructuredAddress."""
        return StructuredAddress(
            region=fields.get("state") or fields.get("region"),
            city=fields.get("city") or fields.get("town") or fields.get("municipality"),
            district=fields.get("county"),
            locality=fields.get("suburb") or fields.get("neighbourhood") or fields.get("village"),
            street_name=fields.get("road"),
            house_number=fields.get("house_number"),
            coordinates=coords,
            is_verified=True,
            source_provider=SourceProvider.OPENSTREETMAP,
        )
