"""Application configuration via Pydantic Settings.

NOTE: every field is mapped to an explicit env variable name
(GEOCODER_USER_AGENT, GEOCODER_REFERER, etc.) to avoid silent misconfiguration.
The geocoding provider rejects anonymous traffic, so GEOCODER_USER_AGENT and
GEOCODER_REFERER must both be set before the client can be built.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Geocoding provider
    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        validation_alias="NOMINATIM_BASE_URL",
    )
    geocoder_user_agent: str = Field(
        default="MarketplaceGeoEngine/1.0",
        validation_alias="GEOCODER_USER_AGENT",
    )
    geocoder_referer: str = Field(default="", validation_alias="GEOCODER_REFERER")
    geocoder_accept_language: str = Field(default="en", validation_alias="GEOCODER_ACCEPT_LANGUAGE")
    geocoder_timeout_seconds: float = Field(default=15.0, validation_alias="GEOCODER_TIMEOUT_SECONDS")
    # Public Nominatim allows 1 req/s; 1.5 s leaves a safety margin
    geocoder_min_interval_ms: int = Field(default=1500, validation_alias="GEOCODER_MIN_INTERVAL_MS")
    geocoder_country_code: str = Field(default="gh", validation_alias="GEOCODER_COUNTRY_CODE")
    geocoder_country_name: str = Field(default="Ghana", validation_alias="GEOCODER_COUNTRY_NAME")
    nearby_search_limit: int = Field(default=10, validation_alias="NEARBY_SEARCH_LIMIT")

    # Verification heuristic (product-tuned, not derived)
    verification_radius_km: float = Field(default=0.5, validation_alias="VERIFICATION_RADIUS_KM")
    verification_zero_confidence_km: float = Field(
        default=5.0,
        validation_alias="VERIFICATION_ZERO_CONFIDENCE_KM",
    )

    # Proximity search defaults used by the API layer
    proximity_default_max_distance_km: float = Field(
        default=50.0,
        validation_alias="PROXIMITY_DEFAULT_MAX_DISTANCE_KM",
    )
    proximity_default_limit: int = Field(default=10, validation_alias="PROXIMITY_DEFAULT_LIMIT")
    batch_geocode_max_queries: int = Field(default=20, validation_alias="BATCH_GEOCODE_MAX_QUERIES")

    # App
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        validation_alias="CORS_ORIGINS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
