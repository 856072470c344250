"""
core/providers/base.py – PlaceProvider base class.
Responsibility: the shared lookup/detail contract and its failure boundary.

Every external place source subclasses PlaceProvider and implements
_search() and _details(). The public lookup()/get_details() never raise:
missing credentials, HTTP errors, bad payloads and timeouts all degrade
to [] / None and are logged.
"""
import asyncio
import logging
from typing import Callable, Optional

import httpx

from ...models import PlaceDetail, ShopCandidate, ShopSource

logger = logging.getLogger(__name__)

USER_AGENT = "BeanVerdict/1.0 (coffee search app)"


class ProviderError(Exception):
    """Provider answered, but not with something usable."""


class PlaceProvider:
    """One external place-data source behind a uniform contract."""

    source: ShopSource
    id_prefix: str = ""
    requires_key: bool = True

    def __init__(
        self,
        api_key: str = "",
        timeout_s: float = 8.0,
        radius_km: float = 50.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key   = api_key
        self._timeout_s = timeout_s
        self._radius_km = radius_km
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._api_key) or not self.requires_key

    # ── Public ─────────────────────────────────────────────────────────────────

    async def lookup(self, query: str, lat: Optional[float], lng: Optional[float]) -> list[ShopCandidate]:
        """Candidates near (lat, lng). [] when disabled, without coordinates, or on any failure."""
        if not self.enabled or lat is None or lng is None:
            return []
        try:
            return await asyncio.wait_for(self._search(query, lat, lng), timeout=self._timeout_s)
        except Exception as e:
            logger.warning("[%s] lookup failed: %s", self.source.value, str(e) or type(e).__name__)
            return []

    async def get_details(self, place_id: str) -> Optional[PlaceDetail]:
        """Rich data for one place id previously returned by lookup(). None on any failure."""
        if not self.enabled or not place_id:
            return None
        try:
            return await asyncio.wait_for(self._details(place_id), timeout=self._timeout_s)
        except Exception as e:
            logger.warning("[%s] details failed for %s: %s", self.source.value, place_id, str(e) or type(e).__name__)
            return None

    def owns(self, place_id: str) -> bool:
        return bool(self.id_prefix) and place_id.startswith(self.id_prefix)

    def strip_prefix(self, place_id: str) -> str:
        return place_id[len(self.id_prefix):] if self.owns(place_id) else place_id

    # ── Subclass hooks ─────────────────────────────────────────────────────────

    async def _search(self, query: str, lat: float, lng: float) -> list[ShopCandidate]:
        raise NotImplementedError

    async def _details(self, place_id: str) -> Optional[PlaceDetail]:
        raise NotImplementedError

    # ── Helpers ────────────────────────────────────────────────────────────────

    def _client(self, headers: Optional[dict] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout_s,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT, **(headers or {})},
        )

    def _convert_all(self, items, convert: Callable[[dict], ShopCandidate]) -> list[ShopCandidate]:
        """Convert each raw item; malformed items are skipped, a non-list payload is an error."""
        if not isinstance(items, list):
            raise ProviderError(f"expected a list of places, got {type(items).__name__}")
        shops = []
        for item in items:
            try:
                shops.append(convert(item))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.debug("[%s] skipped malformed place: %s", self.source.value, e)
        return shops

    @property
    def _radius_m(self) -> int:
        return int(self._radius_km * 1000)

    @staticmethod
    def _rating(value) -> Optional[float]:
        return round(float(value), 1) if value is not None else None

    @staticmethod
    def _price_level(value) -> Optional[str]:
        if value is None:
            return None
        return "$" * min(4, max(1, int(value)))
