"""StructuredAddress: a verified or caller-supplied marketplace location."""

from __future__ import annotations

from dataclasses import dataclass

from geoengine.domain.value_objects.coordinates import Coordinates
from geoengine.domain.value_objects.enums import SourceProvider


@dataclass(frozen=True)
class StructuredAddress:
    """Address broken into the fields profiles store.

    Any field may be unknown. `postal_code` is the caller's external code
    (a GhanaPost GPS-style string) and is never produced by the provider.
    """

    postal_code: str | None = None
    region: str | None = None
    city: str | None = None
    district: str | None = None
    locality: str | None = None
    street_name: str | None = None
    house_number: str | None = None
    nearby_landmark: str | None = None
    coordinates: Coordinates | None = None
    is_verified: bool = False
    source_provider: SourceProvider = SourceProvider.OPENSTREETMAP

    def __post_init__(self) -> None:
        if self.is_verified and self.coordinates is None:
            raise ValueError("A verified address must carry coordinates")

    def to_dict(self) -> dict:
        return {
            "postal_code": self.postal_code,
            "region": self.region,
            "city": self.city,
            "district": self.district,
            "locality": self.locality,
            "street_name": self.street_name,
            "house_number": self.house_number,
            "nearby_landmark": self.nearby_landmark,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "is_verified": self.is_verified,
            "source_provider": self.source_provider.value,
        }
