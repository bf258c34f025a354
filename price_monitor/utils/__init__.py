"""
Utility functions and configurations for the product price monitor.
"""

from .config import DATABASE_URL, OPENAI_API_KEY
from .exceptions import OpenAIServiceError, PersistenceError, ScrapingError
from .logging import logger

__all__ = [
    "DATABASE_URL",
    "OPENAI_API_KEY",
    "logger",
    "OpenAIServiceError",
    "PersistenceError",
    "ScrapingError",
]
