"""Pure geospatial helpers: great-circle distance, viewports, display labels."""

from __future__ import annotations

import math
from dataclasses import dataclass

from geoengine.domain.value_objects.coordinates import Coordinates

# Flat-earth approximation used for search viewports, not for distances
KM_PER_DEGREE_LATITUDE = 111.0


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def to_viewbox(self) -> str:
        """Render as Nominatim's `viewbox=<x1>,<y1>,<x2>,<y2>` (left, top, right, bottom)."""
        return f"{self.min_lon},{self.max_lat},{self.max_lon},{self.min_lat}"


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Haversine great-circle distance between two points (Earth radius 6371 km)."""
    return a.haversine_km(b)


def bounding_box(center: Coordinates, radius_km: float) -> BoundingBox:
    """Approximate a square viewport of `radius_km` around `center`.

    1° latitude is taken as 111 km and 1° longitude as 111·cos(latitude) km.
    Near the poles cos(latitude) tends to zero, so the longitude span is
    capped at the full [-180, 180] range.
    """
    lat_delta = radius_km / KM_PER_DEGREE_LATITUDE
    km_per_lon_degree = KM_PER_DEGREE_LATITUDE * math.cos(to_radians(center.latitude))
    if km_per_lon_degree <= 1e-9:
        lon_delta = 180.0 if radius_km > 0 else 0.0
    else:
        lon_delta = min(180.0, radius_km / km_per_lon_degree)

    return BoundingBox(
        min_lat=max(-90.0, center.latitude - lat_delta),
        max_lat=min(90.0, center.latitude + lat_delta),
        min_lon=max(-180.0, center.longitude - lon_delta),
        max_lon=min(180.0, center.longitude + lon_delta),
    )


def format_distance(km: float) -> str:
    """Human-readable distance: rounded metres below 1 km, else one-decimal km.

    >>> format_distance(0.35)
    '350m'
    >>> format_distance(4.2)
    '4.2km'
    """
    if km < 1:
        # Half-up rounding so 0.0005 km reads as "1m", not banker's "0m"
        return f"{math.floor(km * 1000 + 0.5)}m"
    return f"{km:.1f}km"
