"""routes/places.py – GET /places/{place_id}, GET /location/ip"""
import logging

from fastapi import APIRouter, HTTPException, Request

from ..deps import get_client_ip, get_place_handler
from ..models import LocationResponse, PlaceDetailResponse

router = APIRouter(tags=["Places"])
logger = logging.getLogger(__name__)


@router.get("/places/{place_id}", response_model=PlaceDetailResponse)
async def place_detail(place_id: str):
    """Detail page for a provider place id (`fsq-…`, `osm-…` or a Google id)."""
    try:
        return await get_place_handler().detail(place_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Place detail failed for id=%s", place_id)
        raise HTTPException(status_code=500, detail="Failed to load place")


@router.get("/location/ip", response_model=LocationResponse)
async def location_by_ip(request: Request):
    try:
        return await get_place_handler().locate(get_client_ip(request))
    except LookupError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception:
        logger.exception("IP location failed")
        raise HTTPException(status_code=503, detail="Could not determine location")
