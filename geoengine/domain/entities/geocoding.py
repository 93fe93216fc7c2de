"""Result values returned by geocoding operations.

Failures are data, not exceptions: every provider call yields one of these
with `success=False` and a classified `error_kind` when it goes wrong.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from geoengine.domain.entities.address import StructuredAddress
from geoengine.domain.value_objects.coordinates import Coordinates
from geoengine.domain.value_objects.enums import ProviderErrorKind


@dataclass(frozen=True)
class ProviderError:
    kind: ProviderErrorKind
    message: str

    @classmethod
    def invalid_input(cls, message: str) -> ProviderError:
        return cls(ProviderErrorKind.INVALID_INPUT, message)


@dataclass(frozen=True)
class GeocodeResult:
    """Outcome of a forward geocode.

    `confidence` is the provider's relevance score for the match, not a
    measure of geographic accuracy.
    """

    success: bool
    coordinates: Coordinates | None = None
    display_label: str | None = None
    raw_address_fields: dict[str, Any] | None = None
    confidence: float | None = None
    error: str | None = None
    error_kind: ProviderErrorKind | None = None

    @classmethod
    def failure(cls, err: ProviderError) -> GeocodeResult:
        return cls(success=False, error=err.message, error_kind=err.kind)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "display_label": self.display_label,
            "raw_address_fields": self.raw_address_fields,
            "confidence": self.confidence,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


@dataclass(frozen=True)
class EnrichmentResult:
    """Outcome of a reverse geocode, place lookup or the enrichment waterfall."""

    success: bool
    address: StructuredAddress | None = None
    coordinates: Coordinates | None = None
    raw_response: dict[str, Any] | None = field(default=None, repr=False)
    error: str | None = None
    error_kind: ProviderErrorKind | None = None

    @classmethod
    def failure(cls, err: ProviderError) -> EnrichmentResult:
        return cls(success=False, error=err.message, error_kind=err.kind)

    def to_dict(self, include_raw: bool = False) -> dict:
        data = {
            "success": self.success,
            "address": self.address.to_dict() if self.address else None,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }
        if include_raw:
            data["raw_response"] = self.raw_response
        return data
