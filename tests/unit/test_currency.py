"""Unit tests for money formatting and input masking"""

import pytest
from decimal import Decimal
from clinic_billing.utils.currency import (
    amount_to_cents,
    cents_to_amount,
    format_currency,
    quantize_cents,
    to_decimal,
)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("0"), "0,00"),
        (Decimal("33.33"), "33,33"),
        (1234.5, "1.234,50"),
        ("1234567.891", "1.234.567,89"),
        (Decimal("-75.5"), "-75,50"),
    ],
)
def test_format_currency_pt_br(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_with_symbol():
    assert format_currency(Decimal("250"), symbol=True) == "R$ 250,00"


def test_cents_to_amount_strips_mask():
    """Typed digits are cents; separators and symbols are ignored"""
    assert cents_to_amount("30000") == Decimal("300.00")
    assert cents_to_amount("R$ 1.234,56") == Decimal("1234.56")
    assert cents_to_amount("7") == Decimal("0.07")
    assert cents_to_amount("") == Decimal("0.00")


def test_whole_cents_round_trip():
    for cents in (0, 1, 99, 100, 3333, 123456789):
        assert amount_to_cents(cents_to_amount(str(cents))) == cents


def test_quantize_cents_half_up():
    assert quantize_cents(Decimal("33.335")) == Decimal("33.34")
    assert quantize_cents(Decimal("33.3333")) == Decimal("33.33")


def test_to_decimal_rejects_non_numbers():
    assert to_decimal(0.1) == Decimal("0.1")
    for bad in ("abc", "Infinity", True, None):
        with pytest.raises(ValueError):
            to_decimal(bad)
