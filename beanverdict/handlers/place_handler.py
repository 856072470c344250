"""
handlers/place_handler.py – PlaceHandler class.
Responsibility: provider place detail pages and the IP location fallback endpoint.
"""
import logging
from typing import Optional

from ..core.location import LocationResolver
from ..core.providers.base import PlaceProvider
from ..core.providers.registry import provider_for_place_id
from ..models import LocationResponse, PlaceDetailResponse

logger = logging.getLogger(__name__)


class PlaceHandler:
    """Handles /places/{place_id} and /location/ip."""

    def __init__(self, providers: list[PlaceProvider], resolver: LocationResolver) -> None:
        self._providers = providers
        self._resolver  = resolver

    async def detail(self, place_id: str) -> PlaceDetailResponse:
        """Raises ValueError for an empty id, LookupError when no provider knows the place."""
        place_id = (place_id or "").strip()
        if not place_id:
            raise ValueError("Place ID required")
        provider = provider_for_place_id(self._providers, place_id)
        place = await provider.get_details(place_id) if provider else None
        if place is None:
            raise LookupError("Place not found")
        return PlaceDetailResponse(place=place)

    async def locate(self, client_ip: Optional[str]) -> LocationResponse:
        """Raises LookupError when the client cannot be located."""
        coords = await self._resolver.locate_by_ip(client_ip)
        if coords is None:
            raise LookupError("Could not determine location")
        return LocationResponse(lat=coords.lat, lng=coords.lng)
