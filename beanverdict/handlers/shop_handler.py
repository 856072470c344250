"""
handlers/shop_handler.py – ShopHandler class.
Responsibility: local shop search and the shop detail page.
"""
from typing import Optional

from ..core.catalog import LocalCatalog
from ..core.geo import Coordinates
from ..core.ranking import normalize_query
from ..models import ShopDetailResponse, ShopSearchResponse

MIN_QUERY_LENGTH = 2


class ShopHandler:
    """Handles /shops/search and /shops/{shop_id}."""

    def __init__(self, catalog: LocalCatalog) -> None:
        self._catalog = catalog

    async def search(self, q: str, lat: Optional[float] = None, lng: Optional[float] = None) -> ShopSearchResponse:
        query = normalize_query(q)
        if len(query) < MIN_QUERY_LENGTH:
            return ShopSearchResponse(shops=[])
        origin = Coordinates(lat, lng) if lat is not None and lng is not None else None
        return ShopSearchResponse(shops=await self._catalog.search_shops(query, origin))

    async def detail(self, shop_id: int) -> ShopDetailResponse:
        if shop_id < 1:
            raise ValueError("Invalid shop id")
        return await self._catalog.shop_detail(shop_id)
