"""routes/search.py – GET /search, GET /drinks/search"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from ..deps import get_client_ip, get_search_handler
from ..models import DrinkSearchResponse, SearchResponse

router = APIRouter(tags=["Search"])
logger = logging.getLogger(__name__)


@router.get("/search", response_model=SearchResponse)
async def search(
    request: Request,
    q:        str = Query(default=""),
    lat:      Optional[float] = Query(default=None, ge=-90, le=90),
    lng:      Optional[float] = Query(default=None, ge=-180, le=180),
    location: Optional[str] = Query(default=None, description="Free-text place, geocoded when lat/lng are absent"),
):
    try:
        return await get_search_handler().handle(q, lat, lng, location, client_ip=get_client_ip(request))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Search failed for q=%r", q)
        raise HTTPException(status_code=500, detail="Search failed")


@router.get("/drinks/search", response_model=DrinkSearchResponse)
async def search_drinks(
    q:   str = Query(default=""),
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
):
    try:
        return await get_search_handler().handle_drinks(q, lat, lng)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Drink search failed for q=%r", q)
        raise HTTPException(status_code=500, detail="Search failed")
