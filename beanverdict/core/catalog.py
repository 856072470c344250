"""
core/catalog.py – LocalCatalog class.
Responsibility: read shops/drinks and their review aggregates from the local DB.

All I/O goes through SQLAlchemy Sessions. Blocking calls are wrapped in
run_in_executor so they do not block the event loop.
Reads select explicit columns so databases without `drinks.search_count` still work.
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy import distinct, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import Drink, DrinkReview, Shop
from ..db.session import db_session
from ..models import (
    DrinkCandidate,
    ShopCandidate,
    ShopDetailResponse,
    ShopDrink,
    ShopInfo,
    ShopReview,
    ShopSearchItem,
    ShopSource,
)
from .geo import Coordinates, distance_from, km_to_miles
from .ranking import is_seasonal, sort_drinks_for_menu, sort_shops_by_distance

logger = logging.getLogger(__name__)

POPULARITY_BATCH = 50
SHOP_REVIEW_LIMIT = 50


def round_rating(value) -> Optional[float]:
    return round(float(value), 1) if value is not None else None


class LocalCatalog:
    """Substring search over locally stored shops and drinks (no fuzzy matching)."""

    def __init__(self, database_url: str) -> None:
        self._url = database_url

    # ── Public: Search ─────────────────────────────────────────────────────────

    async def find_shops(self, q: str) -> list[ShopCandidate]:
        """Shops whose name or city contains `q`, with review count + mean rating."""
        return await asyncio.get_event_loop().run_in_executor(None, self._fetch_shops, q)

    async def find_drinks(self, q: str, origin: Optional[Coordinates] = None) -> list[DrinkCandidate]:
        """Drinks whose type or display name contains `q`, ordered by drink id."""
        return await asyncio.get_event_loop().run_in_executor(None, self._fetch_drinks, q, origin)

    async def increment_search_popularity(self, drink_ids: list[int]) -> None:
        """Best-effort search_count += 1. Lost updates and missing columns are tolerated."""
        if not drink_ids:
            return
        await asyncio.get_event_loop().run_in_executor(None, self._do_increment, drink_ids)

    # ── Public: Drinks ─────────────────────────────────────────────────────────

    async def suggest_drinks(self, q: str, limit: int = 10) -> list[str]:
        return await asyncio.get_event_loop().run_in_executor(None, self._fetch_suggestions, q, limit)

    async def popular_drinks(self, limit: int = 24) -> list[str]:
        """Display names ranked by search popularity, then by review volume."""
        return await asyncio.get_event_loop().run_in_executor(None, self._fetch_popular, limit)

    # ── Public: Shops ──────────────────────────────────────────────────────────

    async def search_shops(self, q: str, origin: Optional[Coordinates] = None) -> list[ShopSearchItem]:
        """Local-only shop search with drink counts; nearest first when origin is known."""
        return await asyncio.get_event_loop().run_in_executor(None, self._fetch_shop_items, q, origin)

    async def shop_detail(self, shop_id: int) -> ShopDetailResponse:
        """Shop info, its menu and latest reviews. Raises LookupError if the shop does not exist."""
        return await asyncio.get_event_loop().run_in_executor(None, self._fetch_shop_detail, shop_id)

    # ── Private: ORM helpers ───────────────────────────────────────────────────

    def _fetch_shops(self, q: str) -> list[ShopCandidate]:
        rows, stats = self._query_shops(q)
        return [self._row_to_shop(r, stats.get(r.id)) for r in rows]

    def _fetch_shop_items(self, q: str, origin: Optional[Coordinates]) -> list[ShopSearchItem]:
        rows, stats = self._query_shops(q)
        items = []
        for r in rows:
            st = stats.get(r.id)
            shop = self._row_to_shop(r, st)
            item = ShopSearchItem(**shop.model_dump(), drink_count=st.drink_count if st else 0)
            item.distance_km = distance_from(origin, item.lat, item.lng)
            item.distance_miles = km_to_miles(item.distance_km)
            items.append(item)
        return sort_shops_by_distance(items) if origin else items

    def _query_shops(self, q: str):
        like = f"%{q}%"
        with db_session(self._url) as session:
            rows = (
                session.query(Shop.id, Shop.name, Shop.address, Shop.city, Shop.lat, Shop.lng)
                .filter(Shop.name.ilike(like) | (Shop.city.isnot(None) & Shop.city.ilike(like)))
                .order_by(Shop.id)
                .all()
            )
            stats = self._shop_stats(session, [r.id for r in rows])
        return rows, stats

    @staticmethod
    def _shop_stats(session: Session, shop_ids: list[int]) -> dict:
        if not shop_ids:
            return {}
        rows = (
            session.query(
                Drink.shop_id,
                func.count(distinct(Drink.id)).label("drink_count"),
                func.count(DrinkReview.id).label("review_count"),
                func.avg(DrinkReview.rating).label("avg_rating"),
            )
            .outerjoin(DrinkReview, DrinkReview.drink_id == Drink.id)
            .filter(Drink.shop_id.in_(shop_ids))
            .group_by(Drink.shop_id)
            .all()
        )
        return {r.shop_id: r for r in rows}

    def _fetch_drinks(self, q: str, origin: Optional[Coordinates]) -> list[DrinkCandidate]:
        like = f"%{q}%"
        with db_session(self._url) as session:
            rows = (
                session.query(
                    Drink.id,
                    Drink.drink_type,
                    Drink.display_name,
                    Shop.id.label("shop_id"),
                    Shop.name.label("shop_name"),
                    Shop.address.label("shop_address"),
                    Shop.lat.label("shop_lat"),
                    Shop.lng.label("shop_lng"),
                )
                .join(Shop, Shop.id == Drink.shop_id)
                .filter(Drink.drink_type.ilike(like) | Drink.display_name.ilike(like))
                .order_by(Drink.id)
                .all()
            )
            stats = self._drink_stats(session, [r.id for r in rows])

        drinks = []
        for r in rows:
            st = stats.get(r.id)
            distance = distance_from(origin, r.shop_lat, r.shop_lng)
            drinks.append(DrinkCandidate(
                id=r.id,
                drink_type=r.drink_type,
                display_name=r.display_name,
                shop_id=r.shop_id,
                shop_name=r.shop_name,
                shop_address=r.shop_address,
                avg_rating=round_rating(st.avg_rating) if st else None,
                review_count=st.review_count if st else 0,
                distance_km=distance,
                distance_miles=km_to_miles(distance),
            ))
        return drinks

    @staticmethod
    def _drink_stats(session: Session, drink_ids: list[int]) -> dict:
        if not drink_ids:
            return {}
        rows = (
            session.query(
                DrinkReview.drink_id,
                func.count(DrinkReview.id).label("review_count"),
                func.avg(DrinkReview.rating).label("avg_rating"),
            )
            .filter(DrinkReview.drink_id.in_(drink_ids))
            .group_by(DrinkReview.drink_id)
            .all()
        )
        return {r.drink_id: r for r in rows}

    def _do_increment(self, drink_ids: list[int]) -> None:
        ids = list(dict.fromkeys(drink_ids))[:POPULARITY_BATCH]
        try:
            with db_session(self._url) as session:
                (
                    session.query(Drink)
                    .filter(Drink.id.in_(ids))
                    .update(
                        {Drink.search_count: func.coalesce(Drink.search_count, 0) + 1},
                        synchronize_session=False,
                    )
                )
        except SQLAlchemyError as e:
            logger.debug("search_count update skipped: %s", e)

    def _fetch_suggestions(self, q: str, limit: int) -> list[str]:
        if not q:
            return []
        like = f"%{q}%"
        with db_session(self._url) as session:
            rows = (
                session.query(Drink.display_name)
                .filter(Drink.drink_type.ilike(like) | Drink.display_name.ilike(like))
                .distinct()
                .limit(limit)
                .all()
            )
        return [r.display_name for r in rows]

    def _fetch_popular(self, limit: int) -> list[str]:
        try:
            with db_session(self._url) as session:
                reviews = (
                    session.query(DrinkReview.drink_id, func.count(DrinkReview.id).label("n"))
                    .group_by(DrinkReview.drink_id)
                    .subquery()
                )
                rows = (
                    session.query(Drink.display_name)
                    .outerjoin(reviews, reviews.c.drink_id == Drink.id)
                    .group_by(Drink.display_name)
                    .order_by(
                        func.coalesce(func.sum(Drink.search_count), 0).desc(),
                        func.coalesce(func.sum(reviews.c.n), 0).desc(),
                        Drink.display_name,
                    )
                    .limit(limit)
                    .all()
                )
        except SQLAlchemyError as e:
            logger.warning("Popularity ranking unavailable, falling back to alphabetical: %s", e)
            with db_session(self._url) as session:
                rows = (
                    session.query(Drink.display_name)
                    .group_by(Drink.display_name)
                    .order_by(Drink.display_name)
                    .limit(limit)
                    .all()
                )
        return [r.display_name for r in rows]

    def _fetch_shop_detail(self, shop_id: int) -> ShopDetailResponse:
        with db_session(self._url) as session:
            shop = (
                session.query(Shop.id, Shop.name, Shop.address, Shop.city, Shop.lat, Shop.lng)
                .filter(Shop.id == shop_id)
                .first()
            )
            if shop is None:
                raise LookupError(f"Shop id={shop_id} not found")
            drinks = (
                session.query(
                    Drink.id,
                    Drink.drink_type,
                    Drink.display_name,
                    func.count(DrinkReview.id).label("review_count"),
                    func.avg(DrinkReview.rating).label("avg_rating"),
                )
                .outerjoin(DrinkReview, DrinkReview.drink_id == Drink.id)
                .filter(Drink.shop_id == shop_id)
                .group_by(Drink.id)
                .all()
            )
            reviews = (
                session.query(
                    DrinkReview.id,
                    DrinkReview.rating,
                    DrinkReview.comment,
                    DrinkReview.created_at,
                    Drink.display_name.label("drink_name"),
                )
                .join(Drink, Drink.id == DrinkReview.drink_id)
                .filter(Drink.shop_id == shop_id)
                .order_by(DrinkReview.created_at.desc(), DrinkReview.id.desc())
                .limit(SHOP_REVIEW_LIMIT)
                .all()
            )

        total_reviews = sum(d.review_count for d in drinks)
        overall = None
        if total_reviews:
            overall = sum((d.avg_rating or 0) * d.review_count for d in drinks) / total_reviews

        menu = [
            ShopDrink(
                id=d.id,
                drink_type=d.drink_type,
                display_name=d.display_name,
                avg_rating=round_rating(d.avg_rating),
                review_count=d.review_count,
                is_seasonal=is_seasonal(d.display_name),
            )
            for d in drinks
        ]
        return ShopDetailResponse(
            shop=ShopInfo(
                id=shop.id, name=shop.name, address=shop.address, city=shop.city,
                lat=shop.lat, lng=shop.lng,
                avg_rating=round_rating(overall), review_count=total_reviews,
            ),
            drinks=sort_drinks_for_menu(menu, lambda d: d.display_name or d.drink_type),
            reviews=[ShopReview(**r._asdict()) for r in reviews],
        )

    # ── Private: Converters ────────────────────────────────────────────────────

    @staticmethod
    def _row_to_shop(row, stats) -> ShopCandidate:
        review_count = stats.review_count if stats else 0
        return ShopCandidate(
            id=row.id,
            name=row.name,
            address=row.address,
            city=row.city,
            lat=row.lat,
            lng=row.lng,
            avg_rating=round_rating(stats.avg_rating) if review_count else None,
            review_count=review_count,
            source=ShopSource.LOCAL,
        )
