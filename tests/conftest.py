"""tests/conftest.py – shared fixtures for all tests."""
import pytest

from beanverdict.core.geo import Coordinates
from beanverdict.db import session as db_session_module
from beanverdict.db.models import Drink, DrinkReview, Shop
from beanverdict.db.session import db_session, init_db
from beanverdict.models import DrinkCandidate, ShopCandidate, ShopSource

AUSTIN = Coordinates(30.27, -97.74)
# 2.0 km due north of AUSTIN
TWO_KM_NORTH = Coordinates(30.27 + 2.0 / 111.195, -97.74)


def make_shop(**kw) -> ShopCandidate:
    defaults = dict(id=1, name="Test Coffee", address="1 Test St", lat=None, lng=None, source=ShopSource.LOCAL)
    defaults.update(kw)
    return ShopCandidate(**defaults)


def make_drink(**kw) -> DrinkCandidate:
    defaults = dict(
        id=1, drink_type="latte", display_name="Latte", shop_id=1, shop_name="Test Coffee",
        shop_address="1 Test St", avg_rating=None, review_count=0,
    )
    defaults.update(kw)
    return DrinkCandidate(**defaults)


@pytest.fixture(autouse=True)
def reset_engine_cache():
    """Each test gets fresh engines; temp files are removed between tests."""
    yield
    for engine in db_session_module._engines.values():
        engine.dispose()
    db_session_module._engines.clear()
    db_session_module._session_factories.clear()


@pytest.fixture
def db_url(tmp_path) -> str:
    url = f"sqlite:///{tmp_path / 'test.db'}"
    init_db(url)
    return url


@pytest.fixture
def coffee_db(db_url) -> str:
    """
    Two shops:
      1 "Houndstooth Coffee" 2.0 km north of AUSTIN: Latte (4, 5, 5), Cappuccino (no reviews)
      2 "Merit Coffee" (no coordinates): Oat Milk Latte (3), Pumpkin Spice Latte (5)
    """
    with db_session(db_url) as s:
        s.add_all([
            Shop(id=1, name="Houndstooth Coffee", address="401 Congress Ave", city="Austin",
                 lat=TWO_KM_NORTH.lat, lng=TWO_KM_NORTH.lng),
            Shop(id=2, name="Merit Coffee", address="1200 S Lamar Blvd", city="Austin"),
        ])
        s.flush()
        s.add_all([
            Drink(id=1, shop_id=1, drink_type="latte", display_name="Latte", search_count=0),
            Drink(id=2, shop_id=1, drink_type="cappuccino", display_name="Cappuccino", search_count=0),
            Drink(id=3, shop_id=2, drink_type="oat milk latte", display_name="Oat Milk Latte", search_count=0),
            Drink(id=4, shop_id=2, drink_type="latte", display_name="Pumpkin Spice Latte", search_count=0),
        ])
        s.flush()
        s.add_all([
            DrinkReview(drink_id=1, rating=4, comment="Smooth."),
            DrinkReview(drink_id=1, rating=5, comment=None),
            DrinkReview(drink_id=1, rating=5, comment="Best in town."),
            DrinkReview(drink_id=3, rating=3, comment=None),
            DrinkReview(drink_id=4, rating=5, comment="Seasonal treat."),
        ])
    return db_url


@pytest.fixture
def sample_shops() -> list[ShopCandidate]:
    return [
        make_shop(id=1, name="Houndstooth Coffee", address="401 Congress Ave"),
        make_shop(id="fsq-abc", name="Merit Coffee", address="1200 S Lamar", source=ShopSource.BUDGET_COMMERCIAL),
        make_shop(id="osm-42", name="Fleet Coffee", address="", source=ShopSource.COMMUNITY_MAP),
    ]


@pytest.fixture
def sample_drinks() -> list[DrinkCandidate]:
    return [
        make_drink(id=1, display_name="Latte", avg_rating=4.5, review_count=3),
        make_drink(id=2, drink_type="oat milk latte", display_name="Oat Milk Latte", avg_rating=4.0, review_count=1),
    ]
