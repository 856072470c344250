"""
core/providers/overpass.py – OverpassProvider (OpenStreetMap community map).
Enumerates cafe nodes around a point. No API key, no text ranking: the
query string is ignored and the area itself is the filter. Ids are "osm-<node id>".
"""
from typing import Optional

from ...models import PlaceDetail, ShopCandidate, ShopSource
from .base import PlaceProvider

INTERPRETER_URL = "https://overpass-api.de/api/interpreter"

AREA_RADIUS_KM = 8.0
MAX_RESULTS    = 25
DEFAULT_NAME   = "Coffee Shop"

AROUND_QUERY = """
[out:json][timeout:10];
(
  node["amenity"="cafe"](around:{radius},{lat},{lng});
  node["amenity"="coffee_shop"](around:{radius},{lat},{lng});
);
out center;
"""

NODE_QUERY = """
[out:json][timeout:10];
node({node_id});
out;
"""


class OverpassProvider(PlaceProvider):
    source = ShopSource.COMMUNITY_MAP
    id_prefix = "osm-"
    requires_key = False

    def __init__(self, enabled: bool = True, **kwargs) -> None:
        kwargs.setdefault("radius_km", AREA_RADIUS_KM)
        super().__init__(**kwargs)
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def _search(self, query: str, lat: float, lng: float) -> list[ShopCandidate]:
        data = await self._interpret(AROUND_QUERY.format(radius=self._radius_m, lat=lat, lng=lng))
        return self._convert_all(data.get("elements", []), self._to_candidate)[:MAX_RESULTS]

    async def _details(self, place_id: str) -> Optional[PlaceDetail]:
        node_id = self.strip_prefix(place_id)
        if not node_id.isdigit():
            return None
        data = await self._interpret(NODE_QUERY.format(node_id=node_id))
        elements = data.get("elements") or []
        if not elements:
            return None
        n    = elements[0]
        tags = n.get("tags") or {}
        lat, lng = self._coords(n)
        return PlaceDetail(
            place_id=f"{self.id_prefix}{n.get('id', node_id)}",
            name=tags.get("name") or DEFAULT_NAME,
            address=self._address(tags),
            lat=lat,
            lng=lng,
            opening_hours=[tags["opening_hours"]] if tags.get("opening_hours") else [],
            website=tags.get("website") or tags.get("contact:website"),
            source=self.source,
        )

    # ── Private ────────────────────────────────────────────────────────────────

    async def _interpret(self, overpass_ql: str) -> dict:
        async with self._client() as client:
            resp = await client.post(INTERPRETER_URL, data={"data": overpass_ql})
            resp.raise_for_status()
            return resp.json()

    def _to_candidate(self, n: dict) -> ShopCandidate:
        tags = n.get("tags") or {}
        lat, lng = self._coords(n)
        return ShopCandidate(
            id=f"{self.id_prefix}{n['id']}",
            name=tags.get("name") or DEFAULT_NAME,
            address=self._address(tags),
            lat=lat,
            lng=lng,
            avg_rating=None,
            review_count=0,
            source=self.source,
        )

    @staticmethod
    def _coords(n: dict) -> tuple[Optional[float], Optional[float]]:
        center = n.get("center") or {}
        lat = n.get("lat", center.get("lat"))
        lng = n.get("lon", center.get("lon", center.get("lng")))
        return lat, lng

    @staticmethod
    def _address(tags: dict) -> str:
        if tags.get("addr:street"):
            parts = (tags.get("addr:housenumber"), tags.get("addr:street"), tags.get("addr:city"))
            return ", ".join(p for p in parts if p)
        return tags.get("addr:full") or ""
