"""Currency helpers - dot-decimal internally, pt-BR separators for display"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
CURRENCY_SYMBOL = "R$"

_NON_DIGITS = re.compile(r"\D")


def to_decimal(value: object) -> Decimal:
    """
    Convert int, float, str or Decimal to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary expansion.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def quantize_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: object, symbol: bool = False) -> str:
    """
    Format an amount with pt-BR separators and exactly two fraction digits.

    Example:
        1234.5 → "1.234,50"; with symbol=True → "R$ 1.234,50"
    """
    value = quantize_cents(to_decimal(amount))
    # Swap en-US separators for pt-BR ones
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{CURRENCY_SYMBOL} {text}" if symbol else text


def cents_to_amount(typed: str | int) -> Decimal:
    """
    Turn what a user typed into a masked money input into a decimal amount.

    Every non-digit is dropped and the remaining digits are read as cents,
    so "R$ 1.234,56" and "123456" both become Decimal("1234.56").
    """
    digits = _NON_DIGITS.sub("", str(typed))
    return quantize_cents(Decimal(int(digits or "0")) / 100)


def amount_to_cents(amount: object) -> int:
    return int(quantize_cents(to_decimal(amount)) * 100)
