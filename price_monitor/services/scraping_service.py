"""Service for scraping product pages with a headless browser and site-specific selectors."""

import asyncio
from typing import Any, Dict, Optional

import aiohttp
from bs4 import BeautifulSoup, Tag
import extruct
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright
from w3lib.html import get_base_url

from price_monitor.models.product import ScrapedPage
from price_monitor.utils import ScrapingError, logger
from price_monitor.utils.config import (
    HEADLESS_BROWSER_ENDPOINT,
    SCRAPER_HTTP_FALLBACK,
    SCRAPER_NAVIGATION_TIMEOUT_MS,
    SCRAPER_SELECTOR_TIMEOUT_MS,
    SCRAPER_USER_AGENT,
)
from price_monitor.utils.site_config import SiteConfig, SiteSelectors

_PRODUCT_TYPES = {"Product", "http://schema.org/Product", "https://schema.org/Product"}


def _select_text(soup: BeautifulSoup, selector: str) -> Optional[str]:
    """Visible, trimmed text of the first element matching selector."""
    element = soup.select_one(selector)
    if not isinstance(element, Tag):
        return None
    # Inline children (<b>, <sup>) are joined without a separator, like innerText
    text = " ".join(element.get_text().split())
    return text or None


def _select_inner_html(soup: BeautifulSoup, selector: str) -> Optional[str]:
    element = soup.select_one(selector)
    if not isinstance(element, Tag):
        return None
    html = element.decode_contents().strip()
    return html or None


def extract_structured_product(html_content: str, url: str) -> Dict[str, Any]:
    """
    Read product name and offer price from JSON-LD, Microdata or OpenGraph.

    Returns:
        Dict[str, Any]: Any of "name" and "price" that were found
    """
    try:
        base_url = get_base_url(html_content, url)
        metadata = extruct.extract(html_content, base_url=base_url, uniform=True, syntaxes=["json-ld", "microdata", "opengraph"])
    except Exception as e:
        logger.warning("⚠️ Error extracting structured data: %s", e)
        return {}

    found: Dict[str, Any] = {}
    for item in metadata.get("json-ld", []) + metadata.get("microdata", []):
        if not isinstance(item, dict):
            continue
        item_type = item.get("@type")
        types = item_type if isinstance(item_type, list) else [item_type]
        if not any(isinstance(t, str) and t in _PRODUCT_TYPES for t in types):
            continue
        if item.get("name") and "name" not in found:
            found["name"] = item["name"]
        offers = item.get("offers")
        if isinstance(offers, list) and offers:
            offers = offers[0]
        if isinstance(offers, dict) and offers.get("price") is not None and "price" not in found:
            found["price"] = offers["price"]

    for og_dict in metadata.get("opengraph", []):
        if not isinstance(og_dict, dict):
            continue
        if og_dict.get("og:title") and "name" not in found:
            found["name"] = og_dict["og:title"]
        if og_dict.get("og:price:amount") and "price" not in found:
            found["price"] = og_dict["og:price:amount"]

    return found


def _format_structured_price(price: Any) -> str:
    """'1299.90' or '1,299.90' -> 'R$ 1.299,90' so it goes through the same parser as page text."""
    raw = str(price).strip()
    if "," in raw and "." in raw:
        # Whichever separator comes last is the decimal mark
        if raw.rfind(",") > raw.rfind("."):
            raw = raw.replace(".", "").replace(",", ".")
        else:
            raw = raw.replace(",", "")
    else:
        raw = raw.replace(",", ".")
    try:
        value = float(raw)
    except ValueError:
        return str(price)
    formatted = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {formatted}"


def parse_product_page(html_content: str, url: str, selectors: SiteSelectors) -> ScrapedPage:
    """
    Pull the product fragments out of rendered page HTML.

    Args:
        html_content: Rendered page HTML
        url: Page URL (for structured data base URL resolution)
        selectors: Site selectors to use

    Returns:
        ScrapedPage: Fragments found; missing ones are None
    """
    soup = BeautifulSoup(html_content, "html.parser")

    page = ScrapedPage(
        url=url,
        product_name=_select_text(soup, selectors.product_name),
        price_cash_text=_select_text(soup, selectors.price_cash),
        price_installment_text=_select_text(soup, selectors.price_installment),
        technical_specs_html=_select_inner_html(soup, selectors.technical_specs),
        payment_conditions_text=_select_text(soup, selectors.payment_conditions),
    )

    if page.product_name is None or page.price_cash_text is None:
        structured = extract_structured_product(html_content, url)
        if page.product_name is None and structured.get("name"):
            logger.info("ℹ️ Product name taken from structured data for %s", url)
            page.product_name = str(structured["name"]).strip()
        if page.price_cash_text is None and structured.get("price") is not None:
            logger.info("ℹ️ Cash price taken from structured data for %s", url)
            page.price_cash_text = _format_structured_price(structured["price"])

    logger.info("Cash price text (%s): %s", selectors.price_cash, page.price_cash_text)
    logger.info("Installment price text (%s): %s", selectors.price_installment, page.price_installment_text)
    return page


class ScrapingService:
    """Loads a product page in a headless browser and extracts its price fragments."""

    def __init__(self, site_config: Optional[SiteConfig] = None):
        self.site_config = site_config or SiteConfig()
        self.headers = {
            "User-Agent": SCRAPER_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.5",
        }

    async def scrape_product(self, url: str) -> ScrapedPage:
        """
        Scrape one product page.

        Args:
            url: The product URL to scrape

        Returns:
            ScrapedPage: Extracted fragments

        Raises:
            ScrapingError: If the page could not be loaded
        """
        selectors = self.site_config.resolve(url)
        logger.info("🔍 Scraping %s with %s selectors", url, selectors.name)
        html_content = await self.fetch_page_html(url, selectors)
        return parse_product_page(html_content, url, selectors)

    async def fetch_page_html(self, url: str, selectors: SiteSelectors) -> str:
        """
        Render the page in a headless browser, with an optional plain HTTP fallback.

        Raises:
            ScrapingError: If neither the browser nor the fallback produced HTML
        """
        try:
            return await self._fetch_with_browser(url, selectors)
        except PlaywrightError as e:
            logger.error("❌ Headless browser failed for %s: %s - %s", url, type(e).__name__, e)
            browser_error = e

        if not SCRAPER_HTTP_FALLBACK:
            raise ScrapingError(f"Failed to load product page: {browser_error}", url=url) from browser_error

        logger.info("🚀 Browser session failed for %s, attempting plain HTTP fallback...", url)
        html_content = await self._fetch_with_http(url)
        if html_content is None:
            raise ScrapingError("Failed to load product page with browser and HTTP fallback.", url=url) from browser_error
        return html_content

    async def _fetch_with_browser(self, url: str, selectors: SiteSelectors) -> str:
        async with async_playwright() as p:
            if HEADLESS_BROWSER_ENDPOINT:
                logger.debug("Connecting to remote browser: %s", HEADLESS_BROWSER_ENDPOINT)
                browser = await p.chromium.connect_over_cdp(HEADLESS_BROWSER_ENDPOINT)
            else:
                logger.debug("Launching local headless browser...")
                browser = await p.chromium.launch(headless=True)

            try:
                page = await browser.new_page(user_agent=SCRAPER_USER_AGENT)
                await page.goto(url, timeout=SCRAPER_NAVIGATION_TIMEOUT_MS, wait_until="networkidle")

                # Prices are rendered by JS after load; read the page anyway if they never show up
                try:
                    for selector in selectors.wait_for:
                        await page.wait_for_selector(selector, timeout=SCRAPER_SELECTOR_TIMEOUT_MS)
                    logger.info("✅ Price selectors found for %s", url)
                except PlaywrightTimeoutError as e:
                    logger.warning("⚠️ Timeout waiting for price selectors on %s. Extracting anyway. %s", url, e)

                return await page.content()
            finally:
                await browser.close()

    async def _fetch_with_http(self, url: str) -> Optional[str]:
        try:
            async with aiohttp.ClientSession(headers=self.headers) as session:
                timeout = aiohttp.ClientTimeout(total=SCRAPER_NAVIGATION_TIMEOUT_MS / 1000)
                async with session.get(url, timeout=timeout, allow_redirects=True) as response:
                    if 200 <= response.status < 300:
                        return await response.text(errors="ignore")
                    logger.warning("⚠️ HTTP fallback failed for %s, status: %d", url, response.status)
        except asyncio.TimeoutError:
            logger.warning("⏰ Timeout during HTTP fallback for: %s", url)
        except aiohttp.ClientError as e:
            logger.error("❌ HTTP client error during fallback for %s: %s - %s", url, type(e).__name__, e)
        return None
