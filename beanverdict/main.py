"""
main.py – FastAPI app entry point (slim wire-up only).
Only routes and lifespan live here. No business logic.
"""
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db.session import init_db
from .deps import get_aggregator, get_settings
from .routes import drinks, places, search, shops, system
from .seed import seed_if_empty

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_settings()
    logger.info("Preparing database at %s…", config.database_url)
    init_db(config.database_url)
    if config.seed_demo_data and seed_if_empty(config.database_url):
        logger.info("Demo data seeded.")
    logger.info("Ready.")
    yield
    await get_aggregator().drain()
    logger.info("Shutdown.")


app = FastAPI(
    title="BeanVerdict API",
    description="Coffee shop and drink search across local reviews and map providers.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(system.router, prefix="/api")
app.include_router(search.router, prefix="/api")
app.include_router(drinks.router, prefix="/api")
app.include_router(shops.router, prefix="/api")
app.include_router(places.router, prefix="/api")
