"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class ProviderErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    NETWORK = "network"
    NO_DATA = "no_data"
    CANCELLED = "cancelled"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


class OsmType(str, Enum):
    """OpenStreetMap element kinds accepted by the place lookup."""

    NODE = "N"
    WAY = "W"
    RELATION = "R"


class SourceProvider(str, Enum):
    """Which provider produced a verified address."""

    OPENSTREETMAP = "openstreetmap"
