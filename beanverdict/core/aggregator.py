"""
core/aggregator.py – SearchAggregator class.
Responsibility: one ordered SearchResponse out of the local catalog and
the external place providers, some of which may be slow or failing.

  local shops + drinks ──┐
  google ────────────────┤  gather → merge → distance → dedup → sort
  foursquare ────────────┤
  osm ───────────────────┘

Provider branches are isolated: a raising or hanging provider contributes [].
Local catalog errors are NOT caught: search cannot work without it.
"""
import asyncio
import logging
from typing import Optional

from ..config import SearchConfig
from ..models import DrinkSearchResponse, SearchResponse, ShopCandidate, ShopSource
from .catalog import LocalCatalog
from .geo import Coordinates, distance_from, km_to_miles
from .location import LocationResolver
from .providers.base import PlaceProvider
from .providers.registry import build_providers
from .ranking import (
    build_suggestions,
    dedupe_shops,
    normalize_query,
    sort_drinks,
    sort_shops_by_distance,
    unique_names,
)

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH        = 2
DRINK_SUGGESTION_WINDOW = 20
DRINK_SUGGESTION_LIMIT  = 8

ProviderResults = dict[ShopSource, list[ShopCandidate]]


class SearchAggregator:
    """Multi-source coffee shop + drink search."""

    def __init__(
        self,
        catalog: LocalCatalog,
        providers: list[PlaceProvider],
        resolver: LocationResolver,
        provider_timeout_s: float = 8.0,
    ) -> None:
        self._catalog  = catalog
        self._providers = providers
        self._resolver = resolver
        self._provider_timeout_s = provider_timeout_s
        self._background: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: SearchConfig, transport=None) -> "SearchAggregator":
        return cls(
            catalog=LocalCatalog(config.database_url),
            providers=build_providers(config, transport),
            resolver=LocationResolver(config.location_timeout_s, transport),
            provider_timeout_s=config.provider_timeout_s,
        )

    @property
    def catalog(self) -> LocalCatalog:
        return self._catalog

    @property
    def providers(self) -> list[PlaceProvider]:
        return self._providers

    @property
    def resolver(self) -> LocationResolver:
        return self._resolver

    # ── Public ─────────────────────────────────────────────────────────────────

    async def search(
        self,
        query: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        location_text: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> SearchResponse:
        """
        Unified shops + drinks search.
        With no coordinates and nothing matched locally, the IP fallback locates
        `client_ip` (or the server itself when it is None or private).
        The popularity bump runs in the background and never delays the response.
        """
        q = normalize_query(query)
        if len(q) < MIN_QUERY_LENGTH:
            return SearchResponse()

        # shop matching needs no coordinates: start it while the location resolves
        shops_task = asyncio.ensure_future(self._catalog.find_shops(q))
        try:
            origin = await self._resolver.resolve(lat, lng, location_text)
        except BaseException:
            shops_task.cancel()
            raise
        local = asyncio.gather(shops_task, self._catalog.find_drinks(q, origin))

        remote: ProviderResults = {}
        if origin is not None:
            (local_shops, drinks), remote = await asyncio.gather(local, self._lookup_providers(q, origin))
        else:
            local_shops, drinks = await local
            if not local_shops and not drinks:
                origin = await self._resolver.locate_by_ip(client_ip)
                if origin is not None:
                    remote = await self._lookup_providers(q, origin)

        shops = self._merge(local_shops, remote)
        if origin is not None:
            self._annotate_distance(shops, origin)
        shops = dedupe_shops(shops)
        if origin is not None:
            shops = sort_shops_by_distance(shops)

        drinks = sort_drinks(drinks, q)
        if drinks:
            self._bump_popularity([d.id for d in drinks])

        logger.info("[Search] '%s' → %d shops, %d drinks (origin=%s)", q, len(shops), len(drinks), origin)
        return SearchResponse(shops=shops, drinks=drinks, suggestions=build_suggestions(shops, drinks))

    async def search_drinks(
        self,
        query: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> DrinkSearchResponse:
        """Local drinks only, ranked by relevance. No providers, no popularity bump."""
        q = normalize_query(query)
        if len(q) < MIN_QUERY_LENGTH:
            return DrinkSearchResponse()
        origin = await self._resolver.resolve(lat, lng)
        drinks = sort_drinks(await self._catalog.find_drinks(q, origin), q)
        suggestions = unique_names(
            (d.display_name for d in drinks[:DRINK_SUGGESTION_WINDOW]), DRINK_SUGGESTION_LIMIT
        )
        return DrinkSearchResponse(results=drinks, suggestions=suggestions)

    async def drain(self) -> None:
        """Wait for in-flight popularity writes (shutdown, tests)."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    # ── Private ────────────────────────────────────────────────────────────────

    def _bump_popularity(self, drink_ids: list[int]) -> None:
        task = asyncio.ensure_future(self._catalog.increment_search_popularity(drink_ids))
        self._background.add(task)
        task.add_done_callback(self._popularity_done)

    def _popularity_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("[Search] popularity update failed: %s", task.exception())

    async def _lookup_providers(self, q: str, origin: Coordinates) -> ProviderResults:
        results = await asyncio.gather(
            *(self._isolated_lookup(p, q, origin) for p in self._providers)
        )
        return {p.source: found for p, found in zip(self._providers, results)}

    async def _isolated_lookup(self, provider: PlaceProvider, q: str, origin: Coordinates) -> list[ShopCandidate]:
        try:
            return await asyncio.wait_for(
                provider.lookup(q, origin.lat, origin.lng), timeout=self._provider_timeout_s
            )
        except Exception as e:
            logger.warning("[Search] provider %s dropped: %s", provider.source.value, str(e) or type(e).__name__)
            return []

    @staticmethod
    def _merge(local_shops: list[ShopCandidate], remote: ProviderResults) -> list[ShopCandidate]:
        """Local first; Foursquare replaces Google when it answered; OSM always appended."""
        budget     = remote.get(ShopSource.BUDGET_COMMERCIAL) or []
        commercial = budget or remote.get(ShopSource.PRIMARY_COMMERCIAL) or []
        community  = remote.get(ShopSource.COMMUNITY_MAP) or []
        return [*local_shops, *commercial, *community]

    @staticmethod
    def _annotate_distance(shops: list[ShopCandidate], origin: Coordinates) -> None:
        for shop in shops:
            shop.distance_km    = distance_from(origin, shop.lat, shop.lng)
            shop.distance_miles = km_to_miles(shop.distance_km)
