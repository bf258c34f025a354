"""
Prompt templates for LLM normalization of scraped product fragments.
"""

from . import payment_conditions, technical_features
from .payment_conditions import PaymentConditions

__all__ = ["payment_conditions", "technical_features", "PaymentConditions"]
