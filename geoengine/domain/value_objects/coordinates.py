"""Coordinates value object — immutable (lat, lon) pair."""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def validation_error(self) -> str | None:
        """Return a message describing why the pair is unusable, or None if valid."""
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            return "Latitude and longitude must be finite numbers"
        if not -90.0 <= self.latitude <= 90.0:
            return f"Latitude {self.latitude} is outside [-90, 90]"
        if not -180.0 <= self.longitude <= 180.0:
            return f"Longitude {self.longitude} is outside [-180, 180]"
        return None

    def is_valid(self) -> bool:
        return self.validation_error() is None

    def haversine_km(self, other: "Coordinates") -> float:
        """Calculate distance in km between two points using the Haversine formula."""
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        dlat = math.radians(other.latitude - self.latitude)
        dlon = math.radians(other.longitude - self.longitude)

        a = (
            math.sin(dlat / 2) ** 2
            + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        )
        # Float error can push `a` a hair above 1 for antipodal points
        a = min(1.0, max(0.0, a))
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_KM * c

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}
