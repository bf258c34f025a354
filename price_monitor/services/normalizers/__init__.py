"""Normalizers for turning scraped page text into structured values."""

from price_monitor.services.normalizers.price_normalizer import parse_cash_price, parse_installment_price

__all__ = ["parse_cash_price", "parse_installment_price"]
