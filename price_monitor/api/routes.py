"""API routes for scraping product prices and reading price history."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from price_monitor.dependencies import get_price_monitor_service, get_price_repository, limiter
from price_monitor.models.product import PriceHistory, ProductSummary, ScrapeRequest, ScrapeResult
from price_monitor.services.price_monitor_service import PriceMonitorService
from price_monitor.services.price_repository import PriceRepository
from price_monitor.utils import PersistenceError, ScrapingError, logger
from price_monitor.utils.config import API_RATE_LIMIT_SCRAPE

router = APIRouter()


def _error_response(status_code: int, message: str) -> JSONResponse:
    """Errors go out as {"error": message}, which the front end displays."""
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/")
@limiter.limit("30/minute")
async def health_check(request: Request):
    """
    Health check endpoint to verify API status.

    Returns:
        dict: Status message indicating API is running
    """
    return {"message": "Price Monitor API is running!"}


@router.post("/scrape-product", response_model=ScrapeResult)
@limiter.limit(API_RATE_LIMIT_SCRAPE)
async def scrape_product(
    request: Request,
    payload: Optional[ScrapeRequest] = None,
    service: PriceMonitorService = Depends(get_price_monitor_service),
):
    """
    Scrape a product page, normalize its offer with the LLM and store the price.

    Args:
        request: FastAPI request object (used by rate limiter).
        payload: {"productUrl": "..."}

    Returns:
        ScrapeResult: Normalized price/offer/feature data (camelCase keys)

    Responses:
        400 when the URL is missing or not http(s), 500 on scraping or database failure
    """
    product_url = (payload.product_url or "").strip() if payload else ""
    if not product_url:
        return _error_response(status.HTTP_400_BAD_REQUEST, "Product URL is required.")
    if not product_url.startswith(("http://", "https://")):
        logger.warning("⚠️ Rejected non-http product URL: %s", product_url)
        return _error_response(status.HTTP_400_BAD_REQUEST, "Product URL must be an http(s) URL.")

    logger.info("Scrape request for: %s", product_url)
    try:
        return await service.scrape_and_store(product_url)
    except ScrapingError as e:
        logger.error("❌ Scraping failed for %s: %s", product_url, e)
        return _error_response(e.status_code, e.message)
    except PersistenceError as e:
        logger.error("❌ Saving failed for %s: %s", product_url, e)
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception("💥 Unexpected error while scraping %s: %s", product_url, e)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or "An error occurred on the server while scraping.")


@router.get("/products", response_model=List[ProductSummary])
async def list_products(repository: PriceRepository = Depends(get_price_repository)):
    """List stored products, most recently scraped first."""
    return await repository.list_products()


@router.get("/products/{product_id}/prices", response_model=PriceHistory)
async def get_price_history(product_id: int, repository: PriceRepository = Depends(get_price_repository)):
    """Price history of one product, newest first."""
    product = await repository.get_product(product_id)
    if product is None:
        return _error_response(status.HTTP_404_NOT_FOUND, f"Product {product_id} not found.")
    prices = await repository.get_price_history(product_id)
    return PriceHistory(product=product, prices=prices)
