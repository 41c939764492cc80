"""Order service layer (Use Cases).

Orchestrates the order lifecycle: creation, replacement, deletion and the
payment state machine.  All write operations are atomic; the service
defines the unit-of-work boundary and stamps every timestamp itself.

Business rules enforced:
- Composition rules (seat, items, products, quantities, duplicates) via
  ``validate_order``.
- ``total_price`` is always recomputed from current product prices and
  must fit the order amount column.
- A PAID order cannot be charged again; the check runs under a row lock so
  concurrent payments on the same order are serialized.
- A failed online charge is persisted as ``PAYMENT_FAILED`` before
  ``PaymentProcessingFailed`` is raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import INITIAL_PAYMENT_STATUS, INITIAL_STATUS
from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrderPaid,
    OrderPaymentFailed,
    OrderSettledOffline,
    OrderStatusChanged,
    OrderUpdated,
)
from modules.orders.exceptions import (
    OrderNotFound,
    PaymentProcessingFailed,
    PaymentRejected,
)
from modules.orders.models import Order
from modules.orders.pricing import calculate_total
from modules.orders.validators import validate_order, validate_total

if TYPE_CHECKING:
    from modules.core.repositories.interfaces import Queryable
    from modules.orders.dtos import OrderDraftDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.gateways import PaymentGateway
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

ALREADY_PAID = "Order is already paid"


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the payment gateway via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        payment_gateway: PaymentGateway,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._gateway = payment_gateway

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, draft: OrderDraftDTO) -> Order:
        """Validate, price and persist a new order.

        The caller cannot choose status or payment status: every order
        starts ``OPEN`` / ``PAYMENT_FAILED``.

        Raises:
            InvalidOrder: the draft breaks a composition rule.
        """
        lines = self._priced_lines(draft)
        now = timezone.now()
        order = Order(
            buyer_email=draft.buyer_email,
            seat_letter=draft.seat_letter,
            seat_number=draft.seat_number,
            total_price=self._total(lines),
            status=INITIAL_STATUS,
            payment_status=INITIAL_PAYMENT_STATUS,
            created_at=now,
            updated_at=now,
        )
        order.add_domain_event(OrderCreated(aggregate_id=order.id))
        self._order_repo.create(order, lines)

        logger.info(
            "order.created",
            order_id=str(order.id),
            item_count=len(lines),
            total_price=str(order.total_price),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_order(self, order_id: str, draft: OrderDraftDTO) -> Order:
        """Replace buyer, seat and items of an order and recompute its total.

        Status and payment fields are left untouched.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrder: the draft breaks a composition rule.
        """
        order = self._get_for_update(order_id)
        lines = self._priced_lines(draft)
        total = self._total(lines)

        order.buyer_email = draft.buyer_email
        order.seat_letter = draft.seat_letter
        order.seat_number = draft.seat_number
        order.total_price = total
        order.touch()
        order.add_domain_event(OrderUpdated(aggregate_id=order.id))
        self._order_repo.replace_items(order, lines)

        logger.info(
            "order.updated",
            order_id=str(order.id),
            item_count=len(lines),
            total_price=str(order.total_price),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: str) -> None:
        """Hard-delete an order and its items.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._get_for_update(order_id)
        order.add_domain_event(OrderDeleted(aggregate_id=order.id))
        self._order_repo.remove(order)
        logger.info("order.removed", order_id=str(order_id))

    # ------------------------------------------------------------------
    # Payment state machine
    # ------------------------------------------------------------------

    def attempt_online_payment(self, order_id: str, card_token: str) -> Order:
        """Charge the order total against *card_token*.

        On success the order becomes ``FINISHED`` / ``PAID``.  On gateway
        failure the attempt is recorded (``PAYMENT_FAILED``, status
        unchanged) and committed before ``PaymentProcessingFailed`` is raised.

        Raises:
            OrderNotFound: order does not exist.
            PaymentRejected: order is already paid (nothing is changed).
            PaymentProcessingFailed: the gateway declined or errored.
        """
        failure: Optional[str] = None
        cause: Optional[Exception] = None

        with transaction.atomic():
            order = self._get_for_update(order_id)
            log = logger.bind(order_id=str(order.id), amount=str(order.total_price))
            self._ensure_not_paid(order, log)

            try:
                receipt = self._gateway.charge(order.total_price, card_token)
            except Exception as exc:
                # Any gateway error, typed or not, is recorded as a failed attempt
                failure = str(exc) or type(exc).__name__
                cause = exc
                order.mark_payment_failed(timezone.now())
                order.add_domain_event(
                    OrderPaymentFailed(aggregate_id=order.id, reason=failure)
                )
                self._order_repo.save(order)
                log.warning(
                    "order.payment_failed",
                    reason=failure,
                    error_type=type(exc).__name__,
                )
            else:
                order.mark_paid(card_token, timezone.now())
                order.add_domain_event(
                    OrderPaid(aggregate_id=order.id, amount=str(receipt.amount))
                )
                self._order_repo.save(order)
                log.info("order.paid", reference=str(receipt.reference))

        if failure is not None:
            raise PaymentProcessingFailed(failure) from cause
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def attempt_offline_payment(self, order_id: str) -> Order:
        """Settle the order outside the gateway (``FINISHED`` / ``OFFLINE_PAYMENT``).

        Raises:
            OrderNotFound: order does not exist.
            PaymentRejected: order is already paid.
        """
        order = self._get_for_update(order_id)
        log = logger.bind(order_id=str(order.id))
        self._ensure_not_paid(order, log)

        order.mark_settled_offline(timezone.now())
        order.add_domain_event(OrderSettledOffline(aggregate_id=order.id))
        self._order_repo.save(order)

        log.info("order.settled_offline")
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def set_status(self, order_id: str, new_status: str) -> Order:
        """Overwrite the fulfilment status.

        Administrative override: no transition rules apply and the
        payment fields are not touched.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._get_for_update(order_id)
        old_status = order.status

        order.status = new_status
        order.touch()
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=new_status,
            )
        )
        self._order_repo.save(order)

        logger.info(
            "order.status_overwritten",
            order_id=str(order.id),
            old_status=old_status,
            new_status=new_status,
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> Queryable:
        """Return orders, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_for_update(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @staticmethod
    def _ensure_not_paid(order: Order, log) -> None:
        if order.is_paid:
            log.warning("order.payment_rejected", payment_status=order.payment_status)
            raise PaymentRejected(ALREADY_PAID)

    def _priced_lines(self, draft: OrderDraftDTO) -> List[Dict[str, Any]]:
        """Validate *draft* and snapshot current prices for each line."""
        products = self._load_products(draft)
        validate_order(draft, products)
        return [
            {
                "product": products[item.product_id],
                "quantity": item.quantity,
                "unit_price": products[item.product_id].price,
            }
            for item in draft.items
        ]

    @staticmethod
    def _total(lines: List[Dict[str, Any]]):
        total = calculate_total((line["unit_price"], line["quantity"]) for line in lines)
        validate_total(total)
        return total

    def _load_products(self, draft: OrderDraftDTO) -> Dict[UUID, Product]:
        product_ids = {item.product_id for item in draft.items if item.product_id}
        if not product_ids:
            return {}
        return self._product_repo.get_many(product_ids)
