"""Shared application dependencies."""

from fastapi import Depends
from slowapi import Limiter
from slowapi.util import get_remote_address

from price_monitor.services.offer_normalizer import OfferNormalizer
from price_monitor.services.openai_service import OpenAIService
from price_monitor.services.price_monitor_service import PriceMonitorService
from price_monitor.services.price_repository import PriceRepository
from price_monitor.services.scraping_service import ScrapingService
from price_monitor.utils.config import OPENAI_API_KEY, RATE_LIMIT_STORAGE_URI

# --- Cached Singleton Instances ---
# One instance of each heavy service (DB engine, API client) per application lifecycle
_cache = {}


def get_price_repository() -> PriceRepository:
    """Dependency function to get a PriceRepository instance."""
    if "repository" not in _cache:
        _cache["repository"] = PriceRepository()
    return _cache["repository"]


def get_openai_service() -> OpenAIService:
    """Dependency function to get an OpenAIService instance."""
    if "openai" not in _cache:
        _cache["openai"] = OpenAIService(api_key=OPENAI_API_KEY)
    return _cache["openai"]


def get_offer_normalizer(openai_service: OpenAIService = Depends(get_openai_service)) -> OfferNormalizer:
    """Dependency function to get an OfferNormalizer instance."""
    if "normalizer" not in _cache:
        _cache["normalizer"] = OfferNormalizer(openai_service=openai_service)
    return _cache["normalizer"]


def get_scraping_service() -> ScrapingService:
    """Dependency function to get a ScrapingService instance (loads site selector configs once)."""
    if "scraping" not in _cache:
        _cache["scraping"] = ScrapingService()
    return _cache["scraping"]


def get_price_monitor_service(
    scraping_service: ScrapingService = Depends(get_scraping_service),
    offer_normalizer: OfferNormalizer = Depends(get_offer_normalizer),
    repository: PriceRepository = Depends(get_price_repository),
) -> PriceMonitorService:
    """Dependency function to create a PriceMonitorService with its dependencies (per request)."""
    return PriceMonitorService(scraping_service=scraping_service, offer_normalizer=offer_normalizer, repository=repository)


# --- Rate Limiter Instance ---
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    default_limits=["1000/minute"],
)
