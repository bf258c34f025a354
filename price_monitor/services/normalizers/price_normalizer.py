"""Parsing of Brazilian-formatted price strings (e.g. "R$ 1.299,90")."""

import re
from typing import Optional

from price_monitor.utils import logger

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)")
_CURRENCY_AMOUNT = re.compile(r"R\$\s*([\d\.,]+)")


def _to_float(value: str) -> Optional[float]:
    """Read the leading decimal number of an already normalized string, ignoring trailing text."""
    match = _LEADING_NUMBER.match(value.strip())
    if not match:
        return None
    return float(match.group(0))


def _normalize_decimal(value: str) -> str:
    """'1.299,90' -> '1299.90': dots are thousands separators, the comma is the decimal mark."""
    return value.replace(".", "").replace(",", ".", 1).strip()


def parse_cash_price(text: Optional[str]) -> Optional[float]:
    """
    Parse the cash price text shown next to the product.

    Args:
        text: Raw element text, e.g. "R$ 1.299,90"

    Returns:
        Optional[float]: 1299.9 for the example above, None if no number is present
    """
    if not text:
        return None
    price = _to_float(_normalize_decimal(text.replace("R$", "")))
    if price is None:
        logger.warning("⚠️ Could not parse cash price from text: %r", text)
    return price


def parse_installment_price(text: Optional[str]) -> Optional[float]:
    """
    Parse the per-installment amount out of an installment offer.

    Args:
        text: Raw element text, e.g. "12x de R$ 125,00 sem juros"

    Returns:
        Optional[float]: The first "R$ <amount>" value (125.0 above), None if absent
    """
    if not text:
        return None
    match = _CURRENCY_AMOUNT.search(text)
    if not match:
        logger.warning("⚠️ No currency amount found in installment text: %r", text)
        return None
    return _to_float(_normalize_decimal(match.group(1)))
