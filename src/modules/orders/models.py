"""Order and OrderItem models.

Business rules implemented:
- An order starts OPEN / PAYMENT_FAILED.
- ``total_price`` is written only by the order service (sum of line subtotals).
- OrderItem snapshots the product price at pricing time (``unit_price``);
  ``subtotal`` is always ``quantity * unit_price``.
- One line per product within an order (unique constraint).
- Deleting an order deletes its items (CASCADE); products referenced by
  lines are protected from deletion.
- Timestamps and payment fields are stamped by the service, never by hooks.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    INITIAL_PAYMENT_STATUS,
    INITIAL_STATUS,
    OFFLINE_PAYMENT_GATEWAY,
    ONLINE_PAYMENT_GATEWAY,
    OrderStatus,
    PaymentStatus,
)
from modules.orders.pricing import line_subtotal
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root: one seat, one or more lines, payment state."""

    buyer_email = models.EmailField(max_length=254)
    seat_letter = models.CharField(max_length=2)
    seat_number = models.PositiveIntegerField()
    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=INITIAL_STATUS,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=INITIAL_PAYMENT_STATUS,
    )
    payment_gateway = models.CharField(max_length=50, blank=True, default="")
    card_token = models.CharField(  # noqa: DJ01
        max_length=255, null=True, blank=True, default=None
    )
    payment_date = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["payment_status"], name="orders_payment_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Payment state helpers
    # ------------------------------------------------------------------

    @property
    def is_paid(self) -> bool:
        """``True`` only for online-paid orders (the payment guard's check)."""
        return self.payment_status == PaymentStatus.PAID

    def mark_paid(self, card_token: str, at: datetime) -> None:
        self.payment_status = PaymentStatus.PAID
        self.status = OrderStatus.FINISHED
        self.payment_date = at
        self.payment_gateway = ONLINE_PAYMENT_GATEWAY
        self.card_token = card_token
        self.touch(at)

    def mark_payment_failed(self, at: datetime) -> None:
        self.payment_status = PaymentStatus.PAYMENT_FAILED
        self.touch(at)

    def mark_settled_offline(self, at: datetime) -> None:
        self.payment_status = PaymentStatus.OFFLINE_PAYMENT
        self.status = OrderStatus.FINISHED
        self.payment_date = at
        self.payment_gateway = OFFLINE_PAYMENT_GATEWAY
        self.touch(at)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.seat_number}{self.seat_letter} ({self.status}/{self.payment_status})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``unit_price`` is a **snapshot** of the product price when the order was
    last priced; it never changes if the product price is updated later.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, editable=False)

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.UniqueConstraint(
                fields=["order", "product"],
                name="order_items_unique_product_per_order",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = line_subtotal(self.unit_price, self.quantity)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} ({self.subtotal})"
