"""
config.py – SearchConfig: explicit configuration for the search stack.
Read once from the environment at startup, then passed into constructors.
"""
import logging
import os
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SearchConfig:
    database_url: str = "sqlite:///./pour_over.db"
    primary_provider_key: str = ""          # Google Places
    budget_provider_key: str = ""           # Foursquare
    enable_community_map_provider: bool = True
    provider_timeout_ms: int = 8000
    search_radius_km: float = 50.0
    location_timeout_ms: int = 4000
    seed_demo_data: bool = True

    @property
    def provider_timeout_s(self) -> float:
        return self.provider_timeout_ms / 1000

    @property
    def location_timeout_s(self) -> float:
        return self.location_timeout_ms / 1000


@lru_cache(maxsize=1)
def get_config() -> SearchConfig:
    """Load SearchConfig from environment variables (.env already loaded by main)."""
    cfg = SearchConfig(
        database_url=os.getenv("DATABASE_URL", SearchConfig.database_url),
        primary_provider_key=os.getenv("GOOGLE_PLACES_API_KEY", ""),
        budget_provider_key=os.getenv("FOURSQUARE_API_KEY", ""),
        enable_community_map_provider=os.getenv("ENABLE_OSM_PROVIDER", "true").lower() in _TRUE,
        provider_timeout_ms=int(os.getenv("PROVIDER_TIMEOUT_MS", "8000")),
        search_radius_km=float(os.getenv("SEARCH_RADIUS_KM", "50")),
        location_timeout_ms=int(os.getenv("LOCATION_TIMEOUT_MS", "4000")),
        seed_demo_data=os.getenv("SEED_DEMO_DATA", "true").lower() in _TRUE,
    )
    if not cfg.primary_provider_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not set; Google Places lookups are disabled.")
    if not cfg.budget_provider_key:
        logger.warning("FOURSQUARE_API_KEY is not set; Foursquare lookups are disabled.")
    return cfg
