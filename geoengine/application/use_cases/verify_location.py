"""LocationVerifier — check a claimed coordinate against its claimed postal code."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from geoengine.application.ports.geocoder_port import GeocoderPort
from geoengine.config import settings
from geoengine.domain.geo_math import distance_km
from geoengine.domain.value_objects.coordinates import Coordinates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    verified: bool
    confidence: float
    reference_label: str | None = None
    distance_km: float | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "verified": self.verified,
            "confidence": self.confidence,
            "reference_label": self.reference_label,
            "distance_km": self.distance_km,
            "error": self.error,
        }


class LocationVerifier:
    """Scores how well claimed coordinates agree with the geocoded postal code.

    Heuristic, not a statistical model: a claim passes when it lies within
    `verified_radius_km` of the reference point, and confidence decays
    linearly from 1 at zero discrepancy to 0 at `zero_confidence_km`.
    Both thresholds are product tuning knobs.
    """

    def __init__(
        self,
        geocoder: GeocoderPort,
        verified_radius_km: float | None = None,
        zero_confidence_km: float | None = None,
    ):
        self._geocoder = geocoder
        self._verified_radius_km = (
            verified_radius_km if verified_radius_km is not None else settings.verification_radius_km
        )
        self._zero_confidence_km = (
            zero_confidence_km if zero_confidence_km is not None else settings.verification_zero_confidence_km
        )
        if self._zero_confidence_km <= 0:
            raise ValueError("zero_confidence_km must be positive")

    async def verify(
        self, postal_code: str, claimed: Coordinates, *, timeout: float | None = None
    ) -> VerificationResult:
        """A provider failure, including an expired `timeout`, yields (False, 0.0)."""
        problem = claimed.validation_error()
        if problem:
            logger.warning("Rejected verification input: %s", problem)
            return VerificationResult(verified=False, confidence=0.0, error=problem)

        postal_code = (postal_code or "").strip()
        if not postal_code:
            return VerificationResult(verified=False, confidence=0.0, error="A postal code is required")

        reference = await self._geocoder.geocode(postal_code, timeout=timeout)
        if not reference.success or reference.coordinates is None:
            logger.warning(
                "Could not geocode '%s' for verification (%s): %s",
                postal_code, reference.error_kind, reference.error,
            )
            return VerificationResult(verified=False, confidence=0.0)

        d = distance_km(claimed, reference.coordinates)
        result = VerificationResult(
            verified=d < self._verified_radius_km,
            confidence=self.confidence_for(d),
            reference_label=reference.display_label,
            distance_km=d,
        )
        logger.info(
            "Verified '%s': verified=%s, confidence=%.2f, distance=%.3f km",
            postal_code, result.verified, result.confidence, d,
        )
        return result

    def confidence_for(self, distance: float) -> float:
        return min(1.0, max(0.0, 1.0 - distance / self._zero_confidence_km))
