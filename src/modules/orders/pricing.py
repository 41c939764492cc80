"""Order total calculation."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

from modules.orders.constants import PRICE_QUANTUM

ZERO = Decimal("0.00")


def line_subtotal(unit_price: Decimal, quantity: int) -> Decimal:
    return (Decimal(unit_price) * quantity).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def calculate_total(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Sum ``unit_price * quantity`` over *lines*, rounded to cents.

    Each line is a ``(unit_price, quantity)`` pair.  Summation is exact
    decimal arithmetic, so the result does not depend on line order.
    """
    total = sum((Decimal(price) * quantity for price, quantity in lines), ZERO)
    return total.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
