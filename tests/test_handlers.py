"""
tests/test_handlers.py – SearchHandler, ShopHandler, PlaceHandler.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from beanverdict.core.catalog import LocalCatalog
from beanverdict.core.geo import Coordinates
from beanverdict.handlers.place_handler import PlaceHandler
from beanverdict.handlers.search_handler import SearchHandler
from beanverdict.handlers.shop_handler import ShopHandler
from beanverdict.models import PlaceDetail, SearchResponse, ShopSource


class TestSearchHandler:
    @pytest.mark.asyncio
    async def test_typo_corrected_before_search(self):
        agg = MagicMock()
        agg.search = AsyncMock(return_value=SearchResponse())
        await SearchHandler(agg, MagicMock()).handle("Cappucino", 30.27, -97.74, None, client_ip="8.8.8.8")
        agg.search.assert_awaited_once_with("cappuccino", 30.27, -97.74, location_text=None, client_ip="8.8.8.8")

    @pytest.mark.asyncio
    async def test_suggest_and_popular(self, coffee_db):
        handler = SearchHandler(MagicMock(), LocalCatalog(coffee_db))
        assert "Latte" in (await handler.suggest(" LATTE ")).suggestions
        assert len((await handler.popular()).suggestions) == 4


class TestShopHandler:
    @pytest.mark.asyncio
    async def test_short_query(self, coffee_db):
        assert (await ShopHandler(LocalCatalog(coffee_db)).search("h")).shops == []

    @pytest.mark.asyncio
    async def test_search_with_location(self, coffee_db):
        resp = await ShopHandler(LocalCatalog(coffee_db)).search("coffee", 30.27, -97.74)
        assert resp.shops[0].name == "Houndstooth Coffee"

    @pytest.mark.asyncio
    async def test_invalid_id(self, coffee_db):
        with pytest.raises(ValueError):
            await ShopHandler(LocalCatalog(coffee_db)).detail(0)

    @pytest.mark.asyncio
    async def test_unknown_id(self, coffee_db):
        with pytest.raises(LookupError):
            await ShopHandler(LocalCatalog(coffee_db)).detail(42)


def provider(prefix: str, source: ShopSource, place=None) -> MagicMock:
    p = MagicMock()
    p.id_prefix = prefix
    p.source = source
    p.owns = lambda pid: bool(prefix) and pid.startswith(prefix)
    p.get_details = AsyncMock(return_value=place)
    return p


class TestPlaceHandler:
    @pytest.mark.asyncio
    async def test_routes_to_prefix_owner(self):
        place = PlaceDetail(place_id="fsq-1", name="Merit", source=ShopSource.BUDGET_COMMERCIAL)
        google = provider("", ShopSource.PRIMARY_COMMERCIAL)
        fsq    = provider("fsq-", ShopSource.BUDGET_COMMERCIAL, place)
        resp = await PlaceHandler([google, fsq], MagicMock()).detail("fsq-1")
        assert resp.place.name == "Merit"
        google.get_details.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found(self):
        google = provider("", ShopSource.PRIMARY_COMMERCIAL)
        with pytest.raises(LookupError):
            await PlaceHandler([google], MagicMock()).detail("ChIJ1")

    @pytest.mark.asyncio
    async def test_empty_id(self):
        with pytest.raises(ValueError):
            await PlaceHandler([], MagicMock()).detail("  ")

    @pytest.mark.asyncio
    async def test_locate(self):
        resolver = MagicMock()
        resolver.locate_by_ip = AsyncMock(return_value=Coordinates(30.27, -97.74))
        resp = await PlaceHandler([], resolver).locate("8.8.8.8")
        assert (resp.lat, resp.lng) == (30.27, -97.74)

    @pytest.mark.asyncio
    async def test_locate_failure(self):
        resolver = MagicMock()
        resolver.locate_by_ip = AsyncMock(return_value=None)
        with pytest.raises(LookupError):
            await PlaceHandler([], resolver).locate("8.8.8.8")
