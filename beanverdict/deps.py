"""
deps.py – Dependency Injection: singleton service instances.
Built once at import time from SearchConfig.
"""
from typing import Optional

from fastapi import Request

from .config import SearchConfig, get_config
from .core.aggregator import SearchAggregator
from .core.catalog import LocalCatalog
from .handlers.place_handler import PlaceHandler
from .handlers.search_handler import SearchHandler
from .handlers.shop_handler import ShopHandler

# ── Core singletons ────────────────────────────────────────────────────────────

_config     = get_config()
_aggregator = SearchAggregator.from_config(_config)
_catalog    = _aggregator.catalog

# ── Handler singletons ─────────────────────────────────────────────────────────

_search_h = SearchHandler(_aggregator, _catalog)
_shop_h   = ShopHandler(_catalog)
_place_h  = PlaceHandler(_aggregator.providers, _aggregator.resolver)


# ── Getters (used in routes) ───────────────────────────────────────────────────

def get_settings()       -> SearchConfig:     return _config
def get_catalog()        -> LocalCatalog:     return _catalog
def get_aggregator()     -> SearchAggregator: return _aggregator
def get_search_handler() -> SearchHandler:    return _search_h
def get_shop_handler()   -> ShopHandler:      return _shop_h
def get_place_handler()  -> PlaceHandler:     return _place_h


def get_client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip
    return request.client.host if request.client else None
