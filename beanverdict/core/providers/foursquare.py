"""
core/providers/foursquare.py – FoursquareProvider (budget commercial source).
Places API v3, restricted to the Coffee Shop category; ids are "fsq-<fsq_id>".
Foursquare rates on a 0–10 scale; ratings are halved onto the 0–5 scale.
"""
from typing import Optional

from ...models import ExternalReview, PlaceDetail, ShopCandidate, ShopSource
from .base import PlaceProvider

SEARCH_URL  = "https://api.foursquare.com/v3/places/search"
DETAILS_URL = "https://api.foursquare.com/v3/places/{fsq_id}"

COFFEE_CATEGORY = "13032"
MAX_RADIUS_M    = 100_000
MAX_RESULTS     = 30
MAX_PHOTOS      = 12
MAX_TIPS        = 5
DETAIL_FIELDS   = "fsq_id,name,geocodes,location,rating,stats,photos,website,hours,tel,price,categories,tips"


class FoursquareProvider(PlaceProvider):
    source = ShopSource.BUDGET_COMMERCIAL
    id_prefix = "fsq-"

    async def _search(self, query: str, lat: float, lng: float) -> list[ShopCandidate]:
        params = {
            "query":      f"{query.strip()} coffee",
            "ll":         f"{lat},{lng}",
            "radius":     min(self._radius_m, MAX_RADIUS_M),
            "limit":      MAX_RESULTS,
            "categories": COFFEE_CATEGORY,
        }
        async with self._client(self._auth_headers()) as client:
            resp = await client.get(SEARCH_URL, params=params)
            resp.raise_for_status()
            data = resp.json()
        return self._convert_all(data.get("results", []), self._to_candidate)

    async def _details(self, place_id: str) -> Optional[PlaceDetail]:
        fsq_id = self.strip_prefix(place_id)
        if not fsq_id:
            return None
        async with self._client(self._auth_headers()) as client:
            resp = await client.get(DETAILS_URL.format(fsq_id=fsq_id), params={"fields": DETAIL_FIELDS})
            resp.raise_for_status()
            p = resp.json()

        lat, lng = self._coords(p)
        return PlaceDetail(
            place_id=f"{self.id_prefix}{p.get('fsq_id') or fsq_id}",
            name=p.get("name") or "",
            address=self._address(p),
            lat=lat,
            lng=lng,
            avg_rating=self._scaled_rating(p.get("rating")),
            review_count=self._review_count(p),
            photos=self._photo_urls(p.get("photos") or []),
            reviews=[
                ExternalReview(author=(t.get("user") or {}).get("first_name") or "User", text=t.get("text"))
                for t in (p.get("tips") or [])[:MAX_TIPS]
            ],
            price_level=self._price_level(p.get("price")),
            opening_hours=self._hours(p.get("hours") or {}),
            website=p.get("website"),
            source=self.source,
        )

    # ── Converters ─────────────────────────────────────────────────────────────

    def _auth_headers(self) -> dict:
        return {"Authorization": self._api_key, "Accept": "application/json"}

    def _to_candidate(self, p: dict) -> ShopCandidate:
        lat, lng = self._coords(p)
        return ShopCandidate(
            id=f"{self.id_prefix}{p['fsq_id']}",
            name=p.get("name") or "Coffee Shop",
            address=self._address(p),
            lat=lat,
            lng=lng,
            avg_rating=self._scaled_rating(p.get("rating")),
            review_count=self._review_count(p),
            source=self.source,
        )

    def _scaled_rating(self, value) -> Optional[float]:
        return self._rating(float(value) / 2) if value is not None else None

    @staticmethod
    def _coords(p: dict) -> tuple[Optional[float], Optional[float]]:
        geocodes = p.get("geocodes") or {}
        point = geocodes.get("main") or geocodes.get("roof") or {}
        return point.get("latitude"), point.get("longitude")

    @staticmethod
    def _address(p: dict) -> str:
        loc = p.get("location") or {}
        if loc.get("formatted_address"):
            return loc["formatted_address"]
        return ", ".join(part for part in (loc.get("address"), loc.get("locality"), loc.get("region")) if part)

    @staticmethod
    def _review_count(p: dict) -> int:
        stats = p.get("stats") or {}
        return stats.get("total_ratings") or stats.get("total_photos") or 0

    @staticmethod
    def _photo_urls(photos: list[dict]) -> list[str]:
        urls = []
        for ph in photos[:MAX_PHOTOS]:
            prefix, suffix = ph.get("prefix"), ph.get("suffix")
            if prefix and suffix:
                urls.append(f"{prefix}800x600{suffix}")
        return urls

    @staticmethod
    def _hours(hours: dict) -> list[str]:
        display = hours.get("display")
        if isinstance(display, str):
            return [display]
        entries = display or hours.get("regular") or []
        out = []
        for h in entries:
            if isinstance(h, str):
                out.append(h)
            elif isinstance(h, dict):
                out.append(f"{h.get('day', '')}: {h.get('renderedTime') or h.get('open', '')}")
        return out
