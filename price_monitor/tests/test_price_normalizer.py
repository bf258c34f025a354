import pytest

from price_monitor.services.normalizers.price_normalizer import parse_cash_price, parse_installment_price


@pytest.mark.parametrize(
    "text,expected",
    [
        ("R$ 1.299,90", 1299.90),
        ("R$1.500,00", 1500.0),
        ("R$ 89,99", 89.99),
        ("R$ 12.345.678,10", 12345678.10),
        ("  R$ 2.499,00 à vista  ", 2499.0),
        ("R$ 950", 950.0),
    ],
)
def test_parse_cash_price(text, expected):
    assert parse_cash_price(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", [None, "", "Indisponível", "R$ --"])
def test_parse_cash_price_without_number(text):
    assert parse_cash_price(text) is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("12x de R$ 127,44 sem juros", 127.44),
        ("ou R$ 1.529,29 em até 12x", 1529.29),
        ("10x de R$127,44", 127.44),
        ("12x de R$ 100,00 ou 6x de R$ 200,00", 100.0),
    ],
)
def test_parse_installment_price(text, expected):
    assert parse_installment_price(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", [None, "", "12x sem juros", "1.529,29"])
def test_parse_installment_price_requires_currency_marker(text):
    assert parse_installment_price(text) is None
