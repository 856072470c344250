"""
core/ranking.py – Relevance scoring, shop dedup/ordering and suggestions.
Responsibility: ordering ONLY – no I/O, no provider calls.
"""
import math
import re
from typing import Callable, Iterable, Optional, TypeVar

from ..models import DrinkCandidate, ShopCandidate

T = TypeVar("T")

MAX_SUGGESTIONS       = 10
SUGGESTION_SHOP_NAMES = 4
SUGGESTION_DRINKS     = 6

EXACT_MATCH_SCORE  = 100
PREFIX_MATCH_SCORE = 50

# Menu order on the shop page: the classics first, everything else alphabetical
POPULAR_DRINK_ORDER = [
    "latte", "cappuccino", "espresso", "americano", "cold brew", "mocha", "flat white",
    "cortado", "drip coffee", "oat milk latte", "chai latte", "matcha latte", "macchiato",
    "nitro cold brew", "pour over",
]

SEASONAL_RE = re.compile(r"\b(peppermint|pumpkin|gingerbread|eggnog|holiday)\b", re.I)

DRINK_TYPOS: dict[str, str] = {
    "cappucino": "cappuccino", "capuccino": "cappuccino",
    "expresso": "espresso",
    "pure espresso": "espresso", "pure epsresso": "espresso", "pure expresso": "espresso",
    "lattes": "latte",
    "americanos": "americano",
    "mochas": "mocha",
    "macciato": "macchiato",
    "coldbrew": "cold brew", "cold-brew": "cold brew",
    "pourover": "pour over",
    "flatwhite": "flat white", "flat-white": "flat white",
}

_WS = re.compile(r"\s+")


# ── Query normalisation ────────────────────────────────────────────────────────

def normalize_query(query: str) -> str:
    return (query or "").strip().lower()


def correct_drink_typo(query: str) -> str:
    """Map a well-known misspelling to its drink name; anything else is returned trimmed."""
    q = normalize_query(query)
    return DRINK_TYPOS.get(q, (query or "").strip())


# ── Drinks ─────────────────────────────────────────────────────────────────────

def drink_relevance(drink: DrinkCandidate, q: str) -> float:
    """
    Score = text match (100 exact / 50 prefix / 0)
          + 10 × rating
          + 5 × ln(1 + review_count)
          − 2 × distance_km
    `q` must already be normalised (trimmed, lowercase).
    """
    drink_type = drink.drink_type.lower()
    name       = drink.display_name.lower()

    score = 0.0
    if drink_type == q or name == q:
        score += EXACT_MATCH_SCORE
    elif drink_type.startswith(q) or name.startswith(q):
        score += PREFIX_MATCH_SCORE
    if drink.avg_rating is not None:
        score += drink.avg_rating * 10
    score += math.log1p(drink.review_count) * 5
    if drink.distance_km is not None:
        score -= drink.distance_km * 2
    return score


def sort_drinks(drinks: list[DrinkCandidate], q: str) -> list[DrinkCandidate]:
    """Descending relevance; equal scores keep their input order (stable sort)."""
    return sorted(drinks, key=lambda d: drink_relevance(d, q), reverse=True)


def sort_drinks_for_menu(drinks: list[T], get_name: Callable[[T], Optional[str]]) -> list[T]:
    def key(item: T):
        name = (get_name(item) or "").lower()
        if name in POPULAR_DRINK_ORDER:
            return (0, POPULAR_DRINK_ORDER.index(name), "")
        return (1, 0, name)
    return sorted(drinks, key=key)


def is_seasonal(display_name: Optional[str]) -> bool:
    return bool(SEASONAL_RE.search(display_name or ""))


# ── Shops ──────────────────────────────────────────────────────────────────────

def _norm(text: Optional[str]) -> str:
    return _WS.sub(" ", (text or "").strip().lower())


def shop_key(shop: ShopCandidate) -> tuple[str, str]:
    """Composite dedup key. Differently formatted addresses do not collapse."""
    return _norm(shop.name), _norm(shop.address)


def dedupe_shops(shops: Iterable[ShopCandidate]) -> list[ShopCandidate]:
    seen: set[tuple[str, str]] = set()
    unique: list[ShopCandidate] = []
    for shop in shops:
        key = shop_key(shop)
        if key in seen:
            continue
        seen.add(key)
        unique.append(shop)
    return unique


def sort_shops_by_distance(shops: list[ShopCandidate]) -> list[ShopCandidate]:
    """Nearest first; shops with unknown distance go last in their original order."""
    return sorted(shops, key=lambda s: (s.distance_km is None, s.distance_km or 0.0))


# ── Suggestions ────────────────────────────────────────────────────────────────

def unique_names(names: Iterable[Optional[str]], limit: int) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        if not name or name in seen:
            continue
        seen.add(name)
        out.append(name)
        if len(out) >= limit:
            break
    return out


def build_suggestions(shops: list[ShopCandidate], drinks: list[DrinkCandidate]) -> list[str]:
    names = [
        *(s.name for s in shops[:SUGGESTION_SHOP_NAMES]),
        *(d.display_name for d in drinks[:SUGGESTION_DRINKS]),
    ]
    return unique_names(names, MAX_SUGGESTIONS)
