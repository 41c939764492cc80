"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems) and its outbox events are persisted
together.

Concurrency control on payment and status changes uses
``select_for_update()`` (no ``version`` field exists on the model).
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.core.models import OutboxEvent
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create / replace (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, order: Order, lines: List[Dict[str, Any]]) -> Order:
        self.save(order)
        self._write_items(order, lines)
        logger.info("order.persisted", order_id=str(order.id), item_count=len(lines))
        return order

    @transaction.atomic
    def replace_items(self, order: Order, lines: List[Dict[str, Any]]) -> Order:
        OrderItem.objects.filter(order_id=order.id).delete()
        self.save(order)
        self._write_items(order, lines)
        logger.info("order.items_replaced", order_id=str(order.id), item_count=len(lines))
        return order

    @staticmethod
    def _write_items(order: Order, lines: List[Dict[str, Any]]) -> None:
        for line in lines:
            OrderItem(
                order=order,
                product=line["product"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                created_at=order.updated_at,
                updated_at=order.updated_at,
            ).save()

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _base_queryset(self) -> QuerySet:
        return Order.objects.prefetch_related("items__product")

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded items and their products.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self._base_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Return a queryset of orders, newest first.

        Supported filter keys are any ``Order`` field lookups, e.g.
        ``status``, ``payment_status``, ``created_at__gte``.
        """
        queryset = self._base_queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order and flush its domain events."""
        entity.save()
        event_count = self._flush_events(entity)
        logger.debug("order.saved", order_id=str(entity.id), event_count=event_count)
        return entity

    @transaction.atomic
    def remove(self, order: Order) -> None:
        order_id = order.id
        self._flush_events(order)
        order.delete()
        logger.info("order.deleted", order_id=str(order_id))

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order by ID (items cascade)."""
        order = self.get_by_id(id)
        if not order:
            return False
        self.remove(order)
        return True

    # ------------------------------------------------------------------
    # Outbox
    # ------------------------------------------------------------------

    @staticmethod
    def _flush_events(entity: Order) -> int:
        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=_serialize_event_payload(event),
                topic=OUTBOX_TOPIC,
            )
        entity.clear_domain_events()
        return len(events)


def _serialize_event_payload(event: Any) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, list):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
