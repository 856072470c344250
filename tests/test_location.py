"""
tests/test_location.py – LocationResolver + public IP detection.
"""
import asyncio

import httpx
import pytest

from beanverdict.core.geo import Coordinates
from beanverdict.core.location import LocationResolver, is_public_ip


def transport(payload, seen: list = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, json=payload)
    return httpx.MockTransport(handler)


class TestPublicIp:
    @pytest.mark.parametrize("ip", ["8.8.8.8", "2001:4860:4860::8888", "::ffff:8.8.8.8"])
    def test_public(self, ip):
        assert is_public_ip(ip)

    @pytest.mark.parametrize("ip", ["127.0.0.1", "10.0.0.5", "192.168.1.2", "172.16.0.1", "::1", "fe80::1", "", None, "nope"])
    def test_not_public(self, ip):
        assert not is_public_ip(ip)


class TestResolve:
    @pytest.mark.asyncio
    async def test_explicit_coordinates_win(self):
        seen = []
        resolver = LocationResolver(transport=transport([], seen=seen))
        assert await resolver.resolve(30.27, -97.74, "New York") == Coordinates(30.27, -97.74)
        assert seen == []

    @pytest.mark.asyncio
    async def test_geocodes_location_text(self):
        seen = []
        resolver = LocationResolver(transport=transport([{"lat": "30.2672", "lon": "-97.7431"}], seen=seen))
        assert await resolver.resolve(location_text=" Austin, TX ") == Coordinates(30.2672, -97.7431)
        assert seen[0].url.params["q"] == "Austin, TX"
        assert seen[0].url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_geocode_no_match(self):
        resolver = LocationResolver(transport=transport([]))
        assert await resolver.geocode("Atlantis") is None

    @pytest.mark.asyncio
    async def test_nothing_to_resolve(self):
        assert await LocationResolver().resolve(None, None, "  ") is None


class TestIpLocation:
    @pytest.mark.asyncio
    async def test_public_ip_in_path(self):
        seen = []
        resolver = LocationResolver(transport=transport({"status": "success", "lat": 30.27, "lon": -97.74}, seen=seen))
        assert await resolver.locate_by_ip("8.8.8.8") == Coordinates(30.27, -97.74)
        assert seen[0].url.path == "/json/8.8.8.8"

    @pytest.mark.asyncio
    async def test_private_ip_uses_server_address(self):
        seen = []
        resolver = LocationResolver(transport=transport({"status": "success", "lat": 1.0, "lon": 2.0}, seen=seen))
        await resolver.locate_by_ip("192.168.1.2")
        assert seen[0].url.path == "/json"

    @pytest.mark.asyncio
    async def test_failed_status(self):
        resolver = LocationResolver(transport=transport({"status": "fail"}))
        assert await resolver.locate_by_ip("8.8.8.8") is None

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(10)
            return httpx.Response(200, json={})

        resolver = LocationResolver(timeout_s=0.05, transport=httpx.MockTransport(slow))
        assert await resolver.locate_by_ip("8.8.8.8") is None
