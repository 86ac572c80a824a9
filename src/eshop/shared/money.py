"""Fixed-point money helpers. Prices are ``Decimal`` with two places, never float."""

from decimal import ROUND_HALF_EVEN, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce ``value`` to a two-place Decimal.

    Floats are rejected because they cannot represent most prices exactly.
    """
    if isinstance(value, float):
        raise TypeError("Monetary amounts must not be floats; pass a str, int or Decimal")
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    return to_money(unit_price * quantity)


def sum_money(amounts) -> Decimal:
    return to_money(sum(amounts, ZERO))
