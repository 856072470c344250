"""
tests/test_catalog.py – LocalCatalog against a temporary SQLite database.
"""
import pytest
from sqlalchemy import text

from beanverdict.core.catalog import LocalCatalog
from beanverdict.db.models import Drink
from beanverdict.db.session import db_session
from beanverdict.models import ShopSource

from conftest import AUSTIN


@pytest.fixture
def catalog(coffee_db) -> LocalCatalog:
    return LocalCatalog(coffee_db)


def search_counts(url: str) -> dict[int, int]:
    with db_session(url) as s:
        return {d.id: d.search_count for d in s.query(Drink.id, Drink.search_count)}


# ── find_shops ─────────────────────────────────────────────────────────────────

class TestFindShops:
    @pytest.mark.asyncio
    async def test_matches_name_case_insensitive(self, catalog):
        shops = await catalog.find_shops("houndstooth")
        assert [s.name for s in shops] == ["Houndstooth Coffee"]
        assert shops[0].source == ShopSource.LOCAL

    @pytest.mark.asyncio
    async def test_matches_city(self, catalog):
        shops = await catalog.find_shops("austin")
        assert {s.id for s in shops} == {1, 2}

    @pytest.mark.asyncio
    async def test_review_aggregates(self, catalog):
        shop = (await catalog.find_shops("houndstooth"))[0]
        assert shop.review_count == 3
        assert shop.avg_rating == 4.7

    @pytest.mark.asyncio
    async def test_no_reviews_means_no_rating(self, catalog, coffee_db):
        with db_session(coffee_db) as s:
            s.execute(text("INSERT INTO shops (id, name, address) VALUES (3, 'Quiet Cafe', 'x')"))
        shop = (await catalog.find_shops("quiet"))[0]
        assert shop.review_count == 0
        assert shop.avg_rating is None

    @pytest.mark.asyncio
    async def test_no_match(self, catalog):
        assert await catalog.find_shops("zz") == []


# ── find_drinks ────────────────────────────────────────────────────────────────

class TestFindDrinks:
    @pytest.mark.asyncio
    async def test_substring_on_type_and_name(self, catalog):
        drinks = await catalog.find_drinks("latte")
        assert [d.id for d in drinks] == [1, 3, 4]

    @pytest.mark.asyncio
    async def test_latte_near_austin(self, catalog):
        drink = (await catalog.find_drinks("latte", AUSTIN))[0]
        assert drink.shop_name == "Houndstooth Coffee"
        assert drink.review_count == 3
        assert drink.avg_rating == 4.7
        assert drink.distance_km == pytest.approx(2.0)
        assert drink.distance_miles == 1.2

    @pytest.mark.asyncio
    async def test_distance_unknown_without_shop_coordinates(self, catalog):
        drinks = {d.id: d for d in await catalog.find_drinks("latte", AUSTIN)}
        assert drinks[3].distance_km is None
        assert drinks[3].distance_miles is None

    @pytest.mark.asyncio
    async def test_unreviewed_drink(self, catalog):
        drink = (await catalog.find_drinks("cappuccino"))[0]
        assert drink.review_count == 0
        assert drink.avg_rating is None


# ── Popularity ─────────────────────────────────────────────────────────────────

class TestPopularity:
    @pytest.mark.asyncio
    async def test_increments_each_id_once(self, catalog, coffee_db):
        await catalog.increment_search_popularity([1, 3, 1])
        assert search_counts(coffee_db) == {1: 1, 2: 0, 3: 1, 4: 0}

    @pytest.mark.asyncio
    async def test_at_most_fifty_ids(self, catalog, coffee_db):
        await catalog.increment_search_popularity(list(range(100, 150)) + [1])
        assert search_counts(coffee_db)[1] == 0

    @pytest.mark.asyncio
    async def test_missing_column_tolerated(self, db_url):
        # Legacy table without search_count
        with db_session(db_url) as s:
            s.execute(text("DROP TABLE drinks"))
            s.execute(text(
                "CREATE TABLE drinks (id INTEGER PRIMARY KEY, shop_id INTEGER, drink_type TEXT, display_name TEXT)"
            ))
            s.execute(text("INSERT INTO shops (id, name) VALUES (1, 'Old Shop')"))
            s.execute(text("INSERT INTO drinks VALUES (1, 1, 'latte', 'Latte')"))
        legacy = LocalCatalog(db_url)
        drinks = await legacy.find_drinks("latte")
        assert [d.id for d in drinks] == [1]
        await legacy.increment_search_popularity([1])

    @pytest.mark.asyncio
    async def test_popular_prefers_searched(self, catalog):
        await catalog.increment_search_popularity([2])
        popular = await catalog.popular_drinks()
        assert popular[0] == "Cappuccino"
        assert set(popular) == {"Latte", "Cappuccino", "Oat Milk Latte", "Pumpkin Spice Latte"}

    @pytest.mark.asyncio
    async def test_suggest(self, catalog):
        assert set(await catalog.suggest_drinks("latte")) == {"Latte", "Oat Milk Latte", "Pumpkin Spice Latte"}
        assert await catalog.suggest_drinks("") == []


# ── Shops page ─────────────────────────────────────────────────────────────────

class TestShopPages:
    @pytest.mark.asyncio
    async def test_search_shops_sorted_by_distance(self, catalog):
        items = await catalog.search_shops("coffee", AUSTIN)
        assert [i.id for i in items] == [1, 2]
        assert items[0].drink_count == 2
        assert items[0].distance_km == pytest.approx(2.0)
        assert items[1].distance_km is None

    @pytest.mark.asyncio
    async def test_shop_detail(self, catalog):
        detail = await catalog.shop_detail(2)
        assert detail.shop.name == "Merit Coffee"
        assert detail.shop.review_count == 2
        assert detail.shop.avg_rating == 4.0
        assert [d.display_name for d in detail.drinks] == ["Oat Milk Latte", "Pumpkin Spice Latte"]
        assert [d.is_seasonal for d in detail.drinks] == [False, True]
        assert {r.drink_name for r in detail.reviews} == {"Oat Milk Latte", "Pumpkin Spice Latte"}

    @pytest.mark.asyncio
    async def test_menu_order(self, catalog):
        detail = await catalog.shop_detail(1)
        assert [d.display_name for d in detail.drinks] == ["Latte", "Cappuccino"]

    @pytest.mark.asyncio
    async def test_shop_detail_missing(self, catalog):
        with pytest.raises(LookupError):
            await catalog.shop_detail(999)
