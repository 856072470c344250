"""
core/providers/google.py – GooglePlacesProvider (primary commercial source).
Text Search biased to cafes around the caller; ids are bare Google place_ids.
"""
import logging
from typing import Optional

from ...models import ExternalReview, PlaceDetail, ShopCandidate, ShopSource
from .base import PlaceProvider, ProviderError

logger = logging.getLogger(__name__)

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
DETAILS_URL     = "https://maps.googleapis.com/maps/api/place/details/json"
PHOTO_URL       = "https://maps.googleapis.com/maps/api/place/photo"

MAX_RADIUS_M  = 50_000
MAX_RESULTS   = 20
MAX_PHOTOS    = 12
MAX_REVIEWS   = 5
DETAIL_FIELDS = (
    "name,formatted_address,rating,user_ratings_total,geometry,photos,"
    "opening_hours,price_level,reviews,website"
)


class GooglePlacesProvider(PlaceProvider):
    source = ShopSource.PRIMARY_COMMERCIAL

    async def _search(self, query: str, lat: float, lng: float) -> list[ShopCandidate]:
        params = {
            "query":    f"{query} coffee shop".strip(),
            "location": f"{lat},{lng}",
            "radius":   min(self._radius_m, MAX_RADIUS_M),
            "type":     "cafe",
            "key":      self._api_key,
        }
        async with self._client() as client:
            resp = await client.get(TEXT_SEARCH_URL, params=params)
            resp.raise_for_status()
            data = resp.json()

        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            raise ProviderError(f"status={status} {data.get('error_message', '')}".strip())
        return self._convert_all(data.get("results", []), self._to_candidate)[:MAX_RESULTS]

    async def _details(self, place_id: str) -> Optional[PlaceDetail]:
        params = {"place_id": place_id, "fields": DETAIL_FIELDS, "key": self._api_key}
        async with self._client() as client:
            resp = await client.get(DETAILS_URL, params=params)
            resp.raise_for_status()
            data = resp.json()

        if data.get("status") != "OK":
            logger.info("[google] no details for %s (status=%s)", place_id, data.get("status"))
            return None
        p   = data.get("result") or {}
        loc = (p.get("geometry") or {}).get("location") or {}
        return PlaceDetail(
            place_id=place_id,
            name=p.get("name") or "",
            address=p.get("formatted_address") or "",
            lat=loc.get("lat"),
            lng=loc.get("lng"),
            avg_rating=self._rating(p.get("rating")),
            review_count=p.get("user_ratings_total") or 0,
            photos=self._photo_urls(p.get("photos") or []),
            reviews=[
                ExternalReview(
                    author=r.get("author_name") or "User",
                    rating=r.get("rating"),
                    text=r.get("text"),
                    time=r.get("relative_time_description"),
                )
                for r in (p.get("reviews") or [])[:MAX_REVIEWS]
            ],
            price_level=self._price_level(p.get("price_level")),
            opening_hours=list((p.get("opening_hours") or {}).get("weekday_text") or []),
            website=p.get("website"),
            source=self.source,
        )

    # ── Converters ─────────────────────────────────────────────────────────────

    def _to_candidate(self, p: dict) -> ShopCandidate:
        loc = (p.get("geometry") or {}).get("location") or {}
        return ShopCandidate(
            id=p["place_id"],
            name=p.get("name") or "Coffee Shop",
            address=p.get("formatted_address"),
            lat=loc.get("lat"),
            lng=loc.get("lng"),
            avg_rating=self._rating(p.get("rating")),
            review_count=p.get("user_ratings_total") or 0,
            source=self.source,
        )

    def _photo_urls(self, photos: list[dict]) -> list[str]:
        urls = []
        for photo in photos[:MAX_PHOTOS]:
            ref = photo.get("photo_reference")
            if ref:
                urls.append(f"{PHOTO_URL}?maxwidth=800&photo_reference={ref}&key={self._api_key}")
        return urls
