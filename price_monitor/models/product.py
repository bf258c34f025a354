"""Product data models shared by the scraper, the persistence layer and the API."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ScrapedPage(BaseModel):
    """
    Raw fragments read from a product page.

    Attributes:
        url: Product page URL
        product_name: Visible product title
        price_cash_text: Visible cash price text, e.g. "R$ 1.299,90"
        price_installment_text: Visible installment offer text
        technical_specs_html: Inner HTML of the technical specifications block
        payment_conditions_text: Visible text of the payment conditions block
    """

    url: str
    product_name: Optional[str] = None
    price_cash_text: Optional[str] = None
    price_installment_text: Optional[str] = None
    technical_specs_html: Optional[str] = None
    payment_conditions_text: Optional[str] = None


class CamelModel(BaseModel):
    """Base for models serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands timestamps back naive; they are stored in UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ScrapeRequest(CamelModel):
    """Body of POST /api/scrape-product. Validation of the URL happens in the route."""

    product_url: Optional[str] = Field(default=None, description="Product page URL")


class ProductInfo(BaseModel):
    """Product identity returned to the client."""

    name: Optional[str] = None
    url: str


class ScrapeResult(CamelModel):
    """
    Normalized price/offer/feature data for one scrape.

    Serialized with camelCase keys (priceCash, normalizedConditions, ...).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Product data scraped and saved successfully!",
                "productId": 1,
                "product": {"name": "Placa de Vídeo XFX RX 7600", "url": "https://www.terabyteshop.com.br/produto/123"},
                "priceCash": 1299.9,
                "priceInstallment": 1529.29,
                "normalizedConditions": {"parcelas_sem_juros": 12},
                "extractedFeatures": {"marca": "XFX"},
                "scrapedAt": "2025-01-01T12:00:00+00:00",
            }
        }
    )

    message: str = "Product data scraped and saved successfully!"
    product_id: int
    product: ProductInfo
    price_cash: Optional[float] = None
    price_installment: Optional[float] = None
    normalized_conditions: Optional[Dict[str, Any]] = None
    extracted_features: Optional[Dict[str, Any]] = None
    scraped_at: datetime


class ProductSummary(CamelModel):
    """Stored product row."""

    id: int
    name: str
    url: str
    last_scraped_at: Optional[datetime] = None
    features: Optional[Dict[str, Any]] = None

    @field_validator("last_scraped_at")
    @classmethod
    def last_scraped_at_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class PriceRecord(CamelModel):
    """Stored price row."""

    id: int
    product_id: int
    price_cash: float
    price_installment: Optional[float] = None
    conditions: Optional[Dict[str, Any]] = None
    scraped_at: Optional[datetime] = None

    @field_validator("scraped_at")
    @classmethod
    def scraped_at_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class PriceHistory(CamelModel):
    """A product with its price rows, newest first."""

    product: ProductSummary
    prices: List[PriceRecord] = Field(default_factory=list)
