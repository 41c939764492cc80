"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrderPaid,
    OrderPaymentFailed,
    OrderSettledOffline,
    OrderStatusChanged,
    OrderUpdated,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderLifecycleHandler(IEventHandler):
    """Logs creation, update and deletion of orders."""

    def handle(self, event) -> None:
        logger.info(
            "order.event.lifecycle",
            event_name=event.event_name,
            order_id=str(event.aggregate_id),
        )


class OrderPaymentHandler(IEventHandler):
    """Logs settlement outcomes."""

    def handle(self, event) -> None:
        log = logger.bind(event_name=event.event_name, order_id=str(event.aggregate_id))
        if isinstance(event, OrderPaymentFailed):
            log.warning("order.event.payment_failed", reason=event.reason)
        else:
            log.info("order.event.settled")


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


order_lifecycle_handler = OrderLifecycleHandler()
order_payment_handler = OrderPaymentHandler()
order_status_changed_handler = OrderStatusChangedHandler()

SUBSCRIPTIONS = [
    (OrderCreated, order_lifecycle_handler),
    (OrderUpdated, order_lifecycle_handler),
    (OrderDeleted, order_lifecycle_handler),
    (OrderPaid, order_payment_handler),
    (OrderPaymentFailed, order_payment_handler),
    (OrderSettledOffline, order_payment_handler),
    (OrderStatusChanged, order_status_changed_handler),
]
