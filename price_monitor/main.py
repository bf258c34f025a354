"""Main module for the Product Price Monitor API."""

from contextlib import asynccontextmanager
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from price_monitor.api import routes
from price_monitor.dependencies import get_price_repository, limiter
from price_monitor.services.price_repository import PriceRepository
from price_monitor.utils import logger
from price_monitor.utils.config import FRONTEND_BUILD_DIR, OPENAI_API_KEY, SERVE_FRONTEND

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Lifespan manager for the application.
    Creates the tables on startup and closes the database pool on shutdown.
    """
    logger.info("Application startup...")
    repository: PriceRepository = get_price_repository()
    await repository.init_schema()
    logger.info("API key loaded: %s", "yes" if OPENAI_API_KEY else "no")

    yield

    logger.info("Application shutdown...")
    await repository.dispose()
    logger.info("Database connections closed.")


app = FastAPI(
    title="Product Price Monitor API",
    description="Scrapes a product page, normalizes its offer with an LLM and keeps a price history.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.include_router(routes.router, prefix="/api", tags=["prices"])
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore

# Mounted last so /api routes take precedence over the catch-all static mount
if SERVE_FRONTEND:
    frontend_dir = Path(FRONTEND_BUILD_DIR) if FRONTEND_BUILD_DIR else STATIC_DIR
    if os.path.isdir(frontend_dir):
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
    else:
        logger.warning("⚠️ Front end directory %s not found; serving the API only.", frontend_dir)
