"""
handlers/search_handler.py – SearchHandler class.
Responsibility: orchestrate search requests (typo correction → aggregator / catalog).
"""
import logging
from typing import Optional

from ..core.aggregator import SearchAggregator
from ..core.catalog import LocalCatalog
from ..core.ranking import correct_drink_typo, normalize_query
from ..models import DrinkSearchResponse, SearchResponse, SuggestionsResponse

logger = logging.getLogger(__name__)


class SearchHandler:
    """Handles /search, /drinks/search, /drinks/suggest and /drinks/popular."""

    def __init__(self, aggregator: SearchAggregator, catalog: LocalCatalog) -> None:
        self._aggregator = aggregator
        self._catalog    = catalog

    async def handle(
        self,
        q: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        location: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> SearchResponse:
        query = correct_drink_typo(q)
        if normalize_query(query) != normalize_query(q):
            logger.info("[Search] corrected '%s' → '%s'", q, query)
        return await self._aggregator.search(query, lat, lng, location_text=location, client_ip=client_ip)

    async def handle_drinks(self, q: str, lat: Optional[float] = None, lng: Optional[float] = None) -> DrinkSearchResponse:
        return await self._aggregator.search_drinks(correct_drink_typo(q), lat, lng)

    async def suggest(self, q: str) -> SuggestionsResponse:
        return SuggestionsResponse(suggestions=await self._catalog.suggest_drinks(normalize_query(q)))

    async def popular(self) -> SuggestionsResponse:
        return SuggestionsResponse(suggestions=await self._catalog.popular_drinks())
