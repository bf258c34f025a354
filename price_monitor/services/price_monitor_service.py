"""Scrape -> normalize -> persist pipeline behind the scrape-product endpoint."""

from price_monitor.models.product import ProductInfo, ScrapeResult
from price_monitor.services.normalizers.price_normalizer import parse_cash_price, parse_installment_price
from price_monitor.services.offer_normalizer import OfferNormalizer
from price_monitor.services.price_repository import PriceRepository
from price_monitor.services.scraping_service import ScrapingService
from price_monitor.utils import logger


class PriceMonitorService:
    """
    Runs one scrape of a product URL end to end.

    Steps run sequentially: load the page, parse both prices, ask the LLM to
    normalize the payment conditions and the technical features, then upsert
    the product and append a price row.
    """

    def __init__(self, scraping_service: ScrapingService, offer_normalizer: OfferNormalizer, repository: PriceRepository):
        self.scraping_service = scraping_service
        self.offer_normalizer = offer_normalizer
        self.repository = repository

    async def scrape_and_store(self, url: str) -> ScrapeResult:
        """
        Scrape, normalize and persist one product page.

        Args:
            url: Product page URL

        Returns:
            ScrapeResult: What was stored, ready to send to the client

        Raises:
            ScrapingError: If the page could not be loaded
            PersistenceError: If the product or price could not be saved
        """
        page = await self.scraping_service.scrape_product(url)

        price_cash = parse_cash_price(page.price_cash_text)
        price_installment = parse_installment_price(page.price_installment_text)

        # LLM failures come back as {"error": ...} dicts and are stored as-is
        normalized_conditions = await self.offer_normalizer.normalize_conditions(page.payment_conditions_text)
        extracted_features = await self.offer_normalizer.extract_features(page.technical_specs_html)

        product_id, scraped_at = await self.repository.save_scrape(
            name=page.product_name,
            url=url,
            features=extracted_features,
            price_cash=price_cash,
            price_installment=price_installment,
            conditions=normalized_conditions,
        )

        logger.info("✅ Scrape complete for %s: cash=%s installment=%s", url, price_cash, price_installment)
        return ScrapeResult(
            product_id=product_id,
            product=ProductInfo(name=page.product_name, url=url),
            price_cash=price_cash,
            price_installment=price_installment,
            normalized_conditions=normalized_conditions,
            extracted_features=extracted_features,
            scraped_at=scraped_at,
        )
