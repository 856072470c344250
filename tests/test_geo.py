"""
tests/test_geo.py – Unit tests for core/geo.py
"""
import pytest

from beanverdict.core.geo import Coordinates, distance_from, distance_km, km_to_miles, round_km


class TestDistance:
    def test_zero_for_same_point(self):
        assert distance_km(30.27, -97.74, 30.27, -97.74) == 0

    def test_symmetric(self):
        a = distance_km(30.27, -97.74, 40.71, -74.01)
        b = distance_km(40.71, -74.01, 30.27, -97.74)
        assert a == pytest.approx(b)

    def test_austin_to_new_york(self):
        assert distance_km(30.27, -97.74, 40.71, -74.01) == pytest.approx(2430, rel=0.01)

    def test_one_degree_latitude(self):
        assert distance_km(0, 0, 1, 0) == pytest.approx(111.195, rel=1e-3)


class TestUnits:
    def test_km_to_miles_zero(self):
        assert km_to_miles(0) == 0

    def test_km_to_miles_none(self):
        assert km_to_miles(None) is None

    def test_km_to_miles_rounds_to_one_decimal(self):
        assert km_to_miles(10) == 6.2

    def test_round_km(self):
        assert round_km(1.26) == 1.3
        assert round_km(None) is None


class TestDistanceFrom:
    def test_unknown_origin(self):
        assert distance_from(None, 30.27, -97.74) is None

    def test_unknown_target(self):
        assert distance_from(Coordinates(30.27, -97.74), None, -97.74) is None

    def test_rounded(self):
        d = distance_from(Coordinates(30.27, -97.74), 30.27 + 2.0 / 111.195, -97.74)
        assert d == 2.0
