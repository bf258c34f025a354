"""
Service layer: scraping, LLM normalization, persistence and the pipeline tying them together.
"""

from .offer_normalizer import OfferNormalizer
from .openai_service import OpenAIService
from .price_monitor_service import PriceMonitorService
from .price_repository import PriceRepository
from .scraping_service import ScrapingService

__all__ = ["OfferNormalizer", "OpenAIService", "PriceMonitorService", "PriceRepository", "ScrapingService"]
