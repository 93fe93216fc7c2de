"""LocationEnrichmentOrchestrator — turn partial location input into a structured address."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace

from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.config import settings
from geoengine.domain.entities.address import StructuredAddress
from geoengine.domain.entities.geocoding import EnrichmentResult, ProviderError
from geoengine.domain.value_objects.coordinates import Coordinates
from geoengine.domain.value_objects.enums import SourceProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichmentRequest:
    """What a profile handler knows about a location."""

    postal_code: str
    coordinates: Coordinates | None = None
    landmark: str | None = None


@dataclass(frozen=True)
class EnrichmentStrategy:
    """One fallback step: runs only when `applies` holds, yields a result or None.

    `attempt` is called as `attempt(request, timeout=seconds_or_None)`.
    """

    name: str
    applies: Callable[[EnrichmentRequest], bool]
    attempt: Callable[..., Awaitable[EnrichmentResult | None]]


class LocationEnrichmentOrchestrator:
    """Runs enrichment strategies in order and stops at the first success.

    Third-party failures never surface to the caller: when every strategy
    fails the result is still `success=True`, carrying an unverified address
    built from the caller's own fields. Only malformed input is rejected.
    """

    def __init__(self, geocoder: GeocoderPort, country_name: str | None = None):
        self._geocoder = geocoder
        self._country_name = country_name or settings.geocoder_country_name
        self._strategies: list[EnrichmentStrategy] = [
            EnrichmentStrategy(
                "reverse_from_coordinates",
                lambda req: req.coordinates is not None,
                self.try_reverse_from_coords,
            ),
            EnrichmentStrategy(
                "geocode_postal_code_then_reverse",
                lambda req: bool(req.postal_code),
                self.try_geocode_then_reverse,
            ),
            EnrichmentStrategy(
                "geocode_landmark_then_reverse",
                lambda req: bool(req.landmark),
                self.try_landmark_then_reverse,
            ),
        ]

    @property
    def strategies(self) -> list[EnrichmentStrategy]:
        return self._strategies

    async def enrich(
        self, request: EnrichmentRequest, *, timeout: float | None = None
    ) -> EnrichmentResult:
        """Run the waterfall. `timeout` bounds the whole call, provider waits included.

        Once the budget is spent, remaining strategies are skipped and the
        unverified fallback is returned.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        request = replace(
            request,
            postal_code=(request.postal_code or "").strip(),
            landmark=(request.landmark or "").strip() or None,
        )
        problem = self._validate(request)
        if problem:
            logger.warning("Rejected enrichment input: %s", problem)
            return EnrichmentResult.failure(ProviderError.invalid_input(problem))

        for strategy in self._strategies:
            if not strategy.applies(request):
                continue
            remaining = _remaining(deadline)
            if remaining == 0:
                logger.warning(
                    "Enrichment deadline reached before %s for '%s'", strategy.name, request.postal_code
                )
                break
            result = await strategy.attempt(request, timeout=remaining)
            if result is not None:
                logger.info("Enriched '%s' via %s", request.postal_code, strategy.name)
                return result
            logger.info("Strategy %s gave no result for '%s'", strategy.name, request.postal_code)

        logger.warning("All enrichment strategies failed for '%s', using basic data", request.postal_code)
        return self._unverified(request)

    # ── Strategies ────────────────────────────────────────────────

    async def try_reverse_from_coords(
        self, request: EnrichmentRequest, *, timeout: float | None = None
    ) -> EnrichmentResult | None:
        return await self._reverse_and_stamp(request.coordinates, request, timeout)

    async def try_geocode_then_reverse(
        self, request: EnrichmentRequest, *, timeout: float | None = None
    ) -> EnrichmentResult | None:
        return await self._geocode_then_reverse(request.postal_code, request, timeout)

    async def try_landmark_then_reverse(
        self, request: EnrichmentRequest, *, timeout: float | None = None
    ) -> EnrichmentResult | None:
        return await self._geocode_then_reverse(
            f"{request.landmark}, {self._country_name}", request, timeout
        )

    # ── Private helpers ───────────────────────────────────────────

    async def _geocode_then_reverse(
        self, query: str, request: EnrichmentRequest, timeout: float | None
    ) -> EnrichmentResult | None:
        deadline = None if timeout is None else time.monotonic() + timeout
        # A forward hit has a label but not the structured fields, so reverse it
        found = await self._geocoder.geocode(query, timeout=timeout)
        if not found.success or found.coordinates is None:
            logger.debug("Geocode of '%s' gave nothing usable: %s", query, found.error_kind)
            return None
        remaining = _remaining(deadline)
        if remaining == 0:
            return None
        return await self._reverse_and_stamp(found.coordinates, request, remaining)

    async def _reverse_and_stamp(
        self, coords: Coordinates, request: EnrichmentRequest, timeout: float | None
    ) -> EnrichmentResult | None:
        result = await self._geocoder.reverse_geocode(coords, timeout=timeout)
        if not result.success or result.address is None:
            logger.debug("Reverse geocode of %s gave nothing usable: %s", coords, result.error_kind)
            return None
        # The provider knows nothing of the caller's postal code or landmark
        address = replace(
            result.address,
            postal_code=request.postal_code,
            nearby_landmark=request.landmark or result.address.nearby_landmark,
            coordinates=result.address.coordinates or coords,
            is_verified=True,
        )
        return replace(result, address=address, coordinates=address.coordinates)

    @staticmethod
    def _validate(request: EnrichmentRequest) -> str | None:
        if not request.postal_code:
            return "A postal code (GPS address) is required"
        if request.coordinates is not None:
            return request.coordinates.validation_error()
        return None

    @staticmethod
    def _unverified(request: EnrichmentRequest) -> EnrichmentResult:
        address = StructuredAddress(
            postal_code=request.postal_code,
            nearby_landmark=request.landmark,
            coordinates=request.coordinates,
            is_verified=False,
            source_provider=SourceProvider.OPENSTREETMAP,
        )
        return EnrichmentResult(success=True, address=address, coordinates=request.coordinates)


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())
