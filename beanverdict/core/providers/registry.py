"""
core/providers/registry.py – build the fixed provider set and route place ids to their owner.
"""
from typing import Optional

import httpx

from ...config import SearchConfig
from .base import PlaceProvider
from .foursquare import FoursquareProvider
from .google import GooglePlacesProvider
from .overpass import OverpassProvider


def build_providers(
    config: SearchConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[PlaceProvider]:
    common = dict(timeout_s=config.provider_timeout_s, transport=transport)
    return [
        GooglePlacesProvider(api_key=config.primary_provider_key, radius_km=config.search_radius_km, **common),
        FoursquareProvider(api_key=config.budget_provider_key, radius_km=config.search_radius_km, **common),
        OverpassProvider(enabled=config.enable_community_map_provider, **common),
    ]


def provider_for_place_id(providers: list[PlaceProvider], place_id: str) -> Optional[PlaceProvider]:
    """Prefixed ids go to their prefix owner; bare ids belong to the unprefixed provider."""
    for provider in providers:
        if provider.owns(place_id):
            return provider
    return next((p for p in providers if not p.id_prefix), None)
