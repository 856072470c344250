"""routes/system.py – /health"""
from datetime import datetime

from fastapi import APIRouter

from ..deps import get_aggregator

router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "time": datetime.now().isoformat(),
        "providers": {p.source.value: p.enabled for p in get_aggregator().providers},
    }
