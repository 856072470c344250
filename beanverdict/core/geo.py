"""
core/geo.py – Great-circle distance and unit helpers.
Pure functions, no I/O.
"""
import math
from dataclasses import dataclass
from typing import Optional

EARTH_RADIUS_KM = 6371.0
KM_TO_MILES     = 0.621371


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def km_to_miles(km: Optional[float]) -> Optional[float]:
    return round(km * KM_TO_MILES, 1) if km is not None else None


def round_km(km: Optional[float]) -> Optional[float]:
    return round(km, 1) if km is not None else None


def distance_from(
    origin: Optional[Coordinates],
    lat: Optional[float],
    lng: Optional[float],
) -> Optional[float]:
    """Rounded distance from origin to (lat, lng), or None if either side is unknown."""
    if origin is None or lat is None or lng is None:
        return None
    return round_km(distance_km(origin.lat, origin.lng, lat, lng))
