"""routes/drinks.py – GET /drinks/suggest, GET /drinks/popular"""
import logging

from fastapi import APIRouter, HTTPException, Query

from ..deps import get_search_handler
from ..models import SuggestionsResponse

router = APIRouter(tags=["Drinks"])
logger = logging.getLogger(__name__)


@router.get("/drinks/suggest", response_model=SuggestionsResponse)
async def suggest(q: str = Query(default="")):
    """Autocomplete: distinct drink names containing `q`."""
    try:
        return await get_search_handler().suggest(q)
    except Exception:
        logger.exception("Suggest failed for q=%r", q)
        raise HTTPException(status_code=500, detail="Suggest failed")


@router.get("/drinks/popular", response_model=SuggestionsResponse)
async def popular():
    try:
        return await get_search_handler().popular()
    except Exception:
        logger.exception("Popular drinks failed")
        raise HTTPException(status_code=500, detail="Popular drinks failed")
