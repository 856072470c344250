"""routes/shops.py – GET /shops/search, GET /shops/{shop_id}"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..deps import get_shop_handler
from ..models import ShopDetailResponse, ShopSearchResponse

router = APIRouter(tags=["Shops"])
logger = logging.getLogger(__name__)


@router.get("/shops/search", response_model=ShopSearchResponse)
async def search_shops(
    q:   str = Query(default=""),
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
):
    try:
        return await get_shop_handler().search(q, lat, lng)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Shop search failed for q=%r", q)
        raise HTTPException(status_code=500, detail="Search failed")


@router.get("/shops/{shop_id}", response_model=ShopDetailResponse)
async def shop_detail(shop_id: int):
    try:
        return await get_shop_handler().detail(shop_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Shop detail failed for id=%s", shop_id)
        raise HTTPException(status_code=500, detail="Failed to load shop")
