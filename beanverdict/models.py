"""
models.py – Pydantic schemas for request/response.
"""
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field


# ── Sources ────────────────────────────────────────────────────────────────────

class ShopSource(str, Enum):
    """Closed set of places a shop candidate can come from."""
    LOCAL              = "local"
    PRIMARY_COMMERCIAL = "google"
    BUDGET_COMMERCIAL  = "foursquare"
    COMMUNITY_MAP      = "osm"


# ── Search candidates ──────────────────────────────────────────────────────────

class ShopCandidate(BaseModel):
    id: int | str = Field(description="Local integer id, or provider-namespaced string id")
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    avg_rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    distance_km: Optional[float] = None
    distance_miles: Optional[float] = None
    source: ShopSource


class DrinkCandidate(BaseModel):
    id: int
    drink_type: str
    display_name: str
    shop_id: int
    shop_name: str
    shop_address: Optional[str] = None
    avg_rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    distance_km: Optional[float] = None
    distance_miles: Optional[float] = None


class SearchResponse(BaseModel):
    shops: List[ShopCandidate] = []
    drinks: List[DrinkCandidate] = []
    suggestions: List[str] = []


class DrinkSearchResponse(BaseModel):
    results: List[DrinkCandidate] = []
    suggestions: List[str] = []


class SuggestionsResponse(BaseModel):
    suggestions: List[str]


# ── Local shops ────────────────────────────────────────────────────────────────

class ShopSearchItem(ShopCandidate):
    """ShopCandidate plus the number of drinks listed at the shop."""
    drink_count: int = 0


class ShopSearchResponse(BaseModel):
    shops: List[ShopSearchItem]


class ShopDrink(BaseModel):
    id: int
    drink_type: str
    display_name: str
    avg_rating: Optional[float] = None
    review_count: int = 0
    is_seasonal: bool = False


class ShopReview(BaseModel):
    id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[str] = None
    drink_name: str


class ShopInfo(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    avg_rating: Optional[float] = None
    review_count: int = 0


class ShopDetailResponse(BaseModel):
    shop: ShopInfo
    drinks: List[ShopDrink]
    reviews: List[ShopReview]


# ── External places ────────────────────────────────────────────────────────────

class ExternalReview(BaseModel):
    author: str = "User"
    rating: Optional[float] = None
    text: Optional[str] = None
    time: Optional[str] = None


class PlaceDetail(BaseModel):
    place_id: str
    name: str
    address: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    avg_rating: Optional[float] = None
    review_count: int = 0
    photos: List[str] = []
    reviews: List[ExternalReview] = []
    price_level: Optional[str] = Field(default=None, description="'$' to '$$$$'")
    opening_hours: List[str] = []
    website: Optional[str] = None
    source: ShopSource


class PlaceDetailResponse(BaseModel):
    place: PlaceDetail


# ── Location ───────────────────────────────────────────────────────────────────

class LocationResponse(BaseModel):
    lat: float
    lng: float
