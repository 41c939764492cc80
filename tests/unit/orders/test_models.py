from __future__ import annotations

from decimal import Decimal

import pytest
from django.db import IntegrityError
from django.utils import timezone

from modules.orders.constants import OrderStatus, PaymentStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


@pytest.fixture()
def order():
    return Order.objects.create(
        buyer_email="passenger@example.com",
        seat_letter="B",
        seat_number=7,
        total_price=Decimal("20.00"),
    )


class TestOrderDefaults:
    def test_initial_state(self, order):
        assert order.status == OrderStatus.OPEN
        assert order.payment_status == PaymentStatus.PAYMENT_FAILED
        assert order.payment_gateway == ""
        assert order.card_token is None
        assert order.payment_date is None

    def test_uuid7_primary_key(self, order):
        assert order.id.version == 7


class TestPaymentHelpers:
    def test_mark_paid(self, order):
        at = timezone.now()
        order.mark_paid("tok_1", at)

        assert order.is_paid
        assert order.status == OrderStatus.FINISHED
        assert order.payment_date == at
        assert order.updated_at == at
        assert order.card_token == "tok_1"

    def test_mark_settled_offline_is_not_paid(self, order):
        order.mark_settled_offline(timezone.now())

        assert not order.is_paid
        assert order.payment_status == PaymentStatus.OFFLINE_PAYMENT
        assert order.status == OrderStatus.FINISHED

    def test_mark_payment_failed_keeps_status(self, order):
        order.mark_payment_failed(timezone.now())

        assert order.payment_status == PaymentStatus.PAYMENT_FAILED
        assert order.status == OrderStatus.OPEN


class TestOrderItem:
    def test_subtotal_computed_on_save(self, order, product_a):
        item = OrderItem.objects.create(
            order=order, product=product_a, quantity=3, unit_price=Decimal("10.00")
        )
        assert item.subtotal == Decimal("30.00")

    def test_one_line_per_product(self, order, product_a):
        OrderItem.objects.create(
            order=order, product=product_a, quantity=1, unit_price=Decimal("10.00")
        )
        with pytest.raises(IntegrityError):
            OrderItem.objects.create(
                order=order, product=product_a, quantity=2, unit_price=Decimal("10.00")
            )

    def test_items_cascade_with_order(self, order, product_a):
        OrderItem.objects.create(
            order=order, product=product_a, quantity=1, unit_price=Decimal("10.00")
        )
        order.delete()
        assert OrderItem.objects.count() == 0
