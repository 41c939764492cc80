"""Unit tests for domain event primitives."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.events import OrderCreated, OrderPaid, OrderStatusChanged
from modules.orders.models import Order
from modules.orders.repositories.django_repository import _serialize_event_payload
from shared.domain.events import DomainEvent

pytestmark = pytest.mark.unit


def test_order_registers_and_clears_domain_events():
    order = Order(
        buyer_email="passenger@example.com",
        seat_letter="A",
        seat_number=1,
        total_price=Decimal("0.00"),
    )

    assert order.domain_events == []

    event = OrderCreated(aggregate_id=order.id)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderCreated"

    order.clear_domain_events()
    assert order.domain_events == []


def test_events_register_by_class_name():
    assert DomainEvent.registry["OrderPaid"] is OrderPaid
    assert DomainEvent.registry["OrderStatusChanged"] is OrderStatusChanged


def test_event_rebuilt_from_outbox_payload():
    original = OrderStatusChanged(
        aggregate_id=uuid4(), old_status="OPEN", new_status="FINISHED"
    )
    payload = _serialize_event_payload(original)

    rebuilt = DomainEvent.from_payload("OrderStatusChanged", payload)

    assert rebuilt == original


def test_unknown_event_name_raises_key_error():
    with pytest.raises(KeyError):
        DomainEvent.from_payload("OrderTeleported", {"aggregate_id": str(uuid4())})
