"""
seed.py – Demo data: Austin coffee shops, their drinks and random reviews.

Run directly to reset the demo database:
    python -m beanverdict.seed
"""
import logging
import random
from typing import Optional

from .db.models import Drink, DrinkReview, Shop
from .db.session import db_session, init_db

logger = logging.getLogger(__name__)

SHOPS = [
    ("Houndstooth Coffee",          "401 Congress Ave, Austin, TX 78701",        30.2676, -97.7434),
    ("Houndstooth Coffee",          "4200 N Lamar Blvd, Austin, TX 78756",       30.3089, -97.7345),
    ("Houndstooth Coffee",          "5412 N Lamar Blvd, Austin, TX 78756",       30.3256, -97.7221),
    ("Merit Coffee",                "1200 S Lamar Blvd, Austin, TX 78704",       30.2522, -97.7645),
    ("Flat Track Coffee",           "1619 E Cesar Chavez St, Austin, TX 78702",  30.2551, -97.7266),
    ("Fleet Coffee",                "2424 E Cesar Chavez St, Austin, TX 78702",  30.2542, -97.7155),
    ("Figure 8 Coffee",             "1111 E 11th St, Austin, TX 78702",          30.2689, -97.7289),
    ("Radio Coffee & Beer",         "4204 Manchaca Rd, Austin, TX 78704",        30.2234, -97.7991),
    ("Medici Roasting",             "1101 W 34th St, Austin, TX 78705",          30.3021, -97.7489),
    ("Cuvée Coffee Bar",            "2000 E 6th St, Austin, TX 78702",           30.2612, -97.7178),
    ("Greater Goods Coffee",        "2501 E 5th St, Austin, TX 78702",           30.2589, -97.7145),
    ("Mozart's Coffee Roasters",    "3825 Lake Austin Blvd, Austin, TX 78703",   30.2956, -97.7801),
    ("Jo's Coffee",                 "242 W 2nd St, Austin, TX 78701",            30.2645, -97.7456),
    ("Once Over Coffee Bar",        "2009 S 1st St, Austin, TX 78704",           30.2489, -97.7556),
    ("Batch Craft Beer & Kolaches", "3220 Manor Rd, Austin, TX 78723",           30.2923, -97.6989),
]

DRINK_TYPES = [
    ("cappuccino", "Cappuccino"),
    ("pour over", "Pour Over"),
    ("flat white", "Flat White"),
    ("latte", "Latte"),
    ("espresso", "Espresso"),
    ("americano", "Americano"),
    ("cold brew", "Cold Brew"),
    ("cortado", "Cortado"),
    ("mocha", "Mocha"),
    ("oat milk latte", "Oat Milk Latte"),
    ("drip coffee", "Drip Coffee"),
    ("matcha latte", "Matcha Latte"),
    ("chai latte", "Chai Latte"),
    ("nitro cold brew", "Nitro Cold Brew"),
    ("affogato", "Affogato"),
    ("macchiato", "Macchiato"),
    ("v60", "V60 Pour Over"),
    ("chemex", "Chemex"),
    ("aeropress", "AeroPress"),
]

COMMENTS = [
    "Perfect balance.",
    "Best in town.",
    "Smooth and rich.",
    "Consistently great.",
    "Barista nailed it.",
    "Slightly bitter, still good.",
    "Amazing crema.",
    None, None, None,
]


def seed_if_empty(url: str, rng: Optional[random.Random] = None) -> bool:
    """Seed only when the shops table is empty. Returns True if data was written."""
    init_db(url)
    with db_session(url) as session:
        if session.query(Shop.id).first() is not None:
            return False
    run_seed(url, rng)
    return True


def run_seed(url: str, rng: Optional[random.Random] = None) -> None:
    """Wipe and re-create the demo data."""
    rng = rng or random.Random()
    init_db(url)
    with db_session(url) as session:
        session.query(DrinkReview).delete()
        session.query(Drink).delete()
        session.query(Shop).delete()

        for name, address, lat, lng in SHOPS:
            shop = Shop(name=name, address=address, city="Austin", lat=lat, lng=lng)
            session.add(shop)
            session.flush()

            for drink_type, display in rng.sample(DRINK_TYPES, rng.randint(8, len(DRINK_TYPES))):
                drink = Drink(shop_id=shop.id, drink_type=drink_type, display_name=display, search_count=0)
                session.add(drink)
                session.flush()
                session.add_all(
                    DrinkReview(drink_id=drink.id, rating=rng.randint(3, 5), comment=rng.choice(COMMENTS))
                    for _ in range(rng.randint(2, 12))
                )

    logger.info("Seeded %d shops, drinks and reviews.", len(SHOPS))


if __name__ == "__main__":
    from dotenv import load_dotenv
    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    from .config import get_config
    run_seed(get_config().database_url)
