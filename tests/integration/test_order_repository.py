"""Integration tests for OrderDjangoRepository.

Covers:
- Create: order + items persisted together with their outbox events.
- Replace items: previous lines are removed.
- get_by_id / get_for_update with missing and malformed IDs.
- List with filters.
- Delete: items cascade, deletion event recorded.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCreated, OrderDeleted
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


def _new_order(total: str = "30.00") -> Order:
    return Order(
        buyer_email="repo@example.com",
        seat_letter="C",
        seat_number=14,
        total_price=Decimal(total),
    )


def _lines(*pairs):
    return [
        {"product": product, "quantity": qty, "unit_price": product.price}
        for product, qty in pairs
    ]


class TestCreate:
    def test_persists_order_and_items(self, repo, product_a, product_b):
        order = repo.create(_new_order(), _lines((product_a, 1), (product_b, 1)))

        stored = repo.get_by_id(str(order.id))
        assert stored is not None
        assert [item.product_id for item in stored.items.all()] == [
            product_a.id,
            product_b.id,
        ]
        assert [item.subtotal for item in stored.items.all()] == [
            Decimal("10.00"),
            Decimal("20.00"),
        ]

    def test_flushes_domain_events_to_outbox(self, repo, product_a):
        order = _new_order("10.00")
        order.add_domain_event(OrderCreated(aggregate_id=order.id))

        repo.create(order, _lines((product_a, 1)))

        event = OutboxEvent.objects.get()
        assert event.event_type == "OrderCreated"
        assert event.aggregate_id == str(order.id)
        assert event.topic == "orders"
        assert event.payload["aggregate_id"] == str(order.id)
        assert order.domain_events == []


class TestReplaceItems:
    def test_old_lines_are_removed(self, repo, product_a, product_b):
        order = repo.create(_new_order(), _lines((product_a, 1), (product_b, 1)))

        order.total_price = Decimal("20.00")
        repo.replace_items(order, _lines((product_b, 1)))

        product_ids = OrderItem.objects.filter(order=order).values_list(
            "product_id", flat=True
        )
        assert list(product_ids) == [product_b.id]
        order.refresh_from_db()
        assert order.total_price == Decimal("20.00")


class TestRead:
    def test_get_by_id_missing_returns_none(self, repo):
        assert repo.get_by_id("0190d7a0-0000-7000-8000-000000000000") is None

    def test_get_by_id_malformed_returns_none(self, repo):
        assert repo.get_by_id("not-a-uuid") is None

    def test_get_for_update_returns_order(self, repo, product_a):
        order = repo.create(_new_order("10.00"), _lines((product_a, 1)))
        locked = repo.get_for_update(str(order.id))
        assert locked is not None
        assert locked.id == order.id

    def test_get_for_update_malformed_returns_none(self, repo):
        assert repo.get_for_update("not-a-uuid") is None

    def test_list_with_filters(self, repo, product_a):
        first = repo.create(_new_order("10.00"), _lines((product_a, 1)))
        second = repo.create(_new_order("10.00"), _lines((product_a, 1)))
        second.status = OrderStatus.FINISHED
        repo.save(second)

        finished = repo.list({"status": OrderStatus.FINISHED})

        assert [order.id for order in finished] == [second.id]
        assert repo.list().count() == 2
        assert first.id in {order.id for order in repo.list()}


class TestDelete:
    def test_delete_cascades_items(self, repo, product_a):
        order = repo.create(_new_order("10.00"), _lines((product_a, 1)))

        assert repo.delete(str(order.id)) is True

        assert not Order.objects.filter(id=order.id).exists()
        assert not OrderItem.objects.filter(order_id=order.id).exists()

    def test_delete_missing_returns_false(self, repo):
        assert repo.delete("0190d7a0-0000-7000-8000-000000000000") is False

    def test_remove_records_deletion_event(self, repo, product_a):
        order = repo.create(_new_order("10.00"), _lines((product_a, 1)))
        order.add_domain_event(OrderDeleted(aggregate_id=order.id))

        repo.remove(order)

        assert OutboxEvent.objects.filter(event_type="OrderDeleted").count() == 1
