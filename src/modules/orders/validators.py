"""Order composition rules.

``validate_order`` is a pure check over an order draft and the products it
references.  Rules are evaluated in a fixed order and the first violation is
raised as ``InvalidOrder``:

1. seat letter and a positive seat number are present
2. at least one item
3. every item references an existing product
4. every quantity is positive and fits the quantity column
5. no product appears twice

``validate_total`` runs once the lines are priced.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Mapping
from uuid import UUID

from modules.orders.constants import MAX_AMOUNT, MAX_QUANTITY
from modules.orders.exceptions import InvalidOrder

if TYPE_CHECKING:
    from modules.orders.dtos import OrderDraftDTO
    from modules.products.models import Product

MISSING_SEAT = "missing seat position"
NO_ITEMS = "order must have at least one item"
INVALID_PRODUCT = "invalid product reference"
NON_POSITIVE_QUANTITY = "non-positive quantity"
QUANTITY_TOO_LARGE = "quantity too large"
DUPLICATE_PRODUCT = "duplicate product"
TOTAL_TOO_LARGE = "order total exceeds the maximum amount"


def validate_order(draft: OrderDraftDTO, products: Mapping[UUID, Product]) -> None:
    """Raise ``InvalidOrder`` for the first rule *draft* breaks."""
    if not draft.seat_letter or not draft.seat_letter.strip():
        raise InvalidOrder(MISSING_SEAT)
    if draft.seat_number is None or draft.seat_number < 1:
        raise InvalidOrder(MISSING_SEAT)

    if not draft.items:
        raise InvalidOrder(NO_ITEMS)

    for item in draft.items:
        if item.product_id is None or item.product_id not in products:
            raise InvalidOrder(INVALID_PRODUCT)
        if item.quantity is None or item.quantity <= 0:
            raise InvalidOrder(NON_POSITIVE_QUANTITY)
        if item.quantity > MAX_QUANTITY:
            raise InvalidOrder(QUANTITY_TOO_LARGE)

    product_ids = [item.product_id for item in draft.items]
    if len(product_ids) != len(set(product_ids)):
        raise InvalidOrder(DUPLICATE_PRODUCT)


def validate_total(total: Decimal) -> None:
    """Reject totals the order columns cannot store.

    Prices are non-negative, so every line subtotal is bounded by the total.
    """
    if total > MAX_AMOUNT:
        raise InvalidOrder(TOTAL_TOO_LARGE)
