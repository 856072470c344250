"""
core/location.py – LocationResolver class.
Responsibility: best-effort coordinates for a request.

Precedence: explicit lat/lng → geocoded location text → coarse IP location.
Every network step is raced against a timeout; any failure returns None
and the caller carries on without coordinates.
"""
import asyncio
import ipaddress
import logging
from typing import Optional

import httpx

from .geo import Coordinates

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
IP_API_URL    = "http://ip-api.com/json"
USER_AGENT    = "BeanVerdict/1.0 (coffee search app)"


def is_public_ip(ip: Optional[str]) -> bool:
    """False for private, loopback, link-local, unparseable and empty addresses."""
    if not ip:
        return False
    try:
        addr = ipaddress.ip_address(ip.strip())
    except ValueError:
        return False
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped
    return not (addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_unspecified)


class LocationResolver:
    """Geocoding (Nominatim) + IP geolocation (ip-api.com) with hard timeouts."""

    def __init__(
        self,
        timeout_s: float = 4.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._transport = transport

    # ── Public ─────────────────────────────────────────────────────────────────

    async def resolve(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        location_text: Optional[str] = None,
    ) -> Optional[Coordinates]:
        """Explicit coordinates win; otherwise geocode the free-text location."""
        if lat is not None and lng is not None:
            return Coordinates(lat, lng)
        if location_text and location_text.strip():
            return await self.geocode(location_text)
        return None

    async def geocode(self, address_text: str) -> Optional[Coordinates]:
        """First Nominatim match for the address, or None."""
        return await self._bounded("geocode", self._geocode(address_text.strip()))

    async def locate_by_ip(self, client_ip: Optional[str]) -> Optional[Coordinates]:
        """City-level coordinates for the client; private addresses resolve the server's own IP."""
        return await self._bounded("ip-locate", self._locate_by_ip(client_ip))

    # ── Private ────────────────────────────────────────────────────────────────

    async def _bounded(self, step: str, coro) -> Optional[Coordinates]:
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout_s)
        except Exception as e:
            logger.warning("[Location] %s failed: %s", step, str(e) or type(e).__name__)
            return None

    async def _geocode(self, address_text: str) -> Optional[Coordinates]:
        if not address_text:
            return None
        params = {"format": "json", "q": address_text, "limit": 1}
        async with self._client() as client:
            resp = await client.get(NOMINATIM_URL, params=params, headers={"Accept-Language": "en"})
            resp.raise_for_status()
            data = resp.json()
        if not data:
            logger.info("[Location] no geocode match for %r", address_text)
            return None
        best = data[0]
        return Coordinates(float(best["lat"]), float(best["lon"]))

    async def _locate_by_ip(self, client_ip: Optional[str]) -> Optional[Coordinates]:
        suffix = f"/{client_ip.strip()}" if is_public_ip(client_ip) else ""
        async with self._client() as client:
            resp = await client.get(f"{IP_API_URL}{suffix}", params={"fields": "lat,lon,status"})
            resp.raise_for_status()
            data = resp.json()
        if data.get("status") != "success" or data.get("lat") is None or data.get("lon") is None:
            return None
        return Coordinates(float(data["lat"]), float(data["lon"]))

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout_s,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT},
        )
