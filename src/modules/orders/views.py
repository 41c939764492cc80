"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.orders.dtos import OrderDraftDTO, OrderItemDTO
from modules.orders.exceptions import (
    InvalidOrder,
    OrderNotFound,
    PaymentProcessingFailed,
    PaymentRejected,
)
from modules.orders.filters import OrderFilter
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderInputSerializer,
    OrderSerializer,
    OrderStatusQuerySerializer,
    PaymentQuerySerializer,
)
from modules.orders.services import OrderService
from modules.payments.client import get_payment_gateway
from modules.products.repositories.django_repository import ProductDjangoRepository

ORDER_NOT_FOUND = "Order not found."


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories and the configured
    payment gateway (DIP).  Does **not** extend ``ModelViewSet``; all ORM
    access goes through the service/repository layer.
    """

    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_price", "status", "payment_status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            payment_gateway=get_payment_gateway(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Scope throttling per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"pay", "offline_payment"}:
            throttle_scope = "order_payment"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/orders

        Filtering is handled by ``OrderFilter`` and ordering by
        ``OrderingFilter`` via ``filter_backends``.
        """
        queryset = self.filter_queryset(self.get_queryset())
        return Response(OrderSerializer(queryset, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/orders/{pk}"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/orders"""
        draft = self._build_draft(request)
        if isinstance(draft, Response):
            return draft

        try:
            order = self._service.create_order(draft)
        except InvalidOrder as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        out = OrderSerializer(order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/orders/{pk}

        Replaces buyer, seat and items; the total is recomputed.
        """
        draft = self._build_draft(request)
        if isinstance(draft, Response):
            return draft

        try:
            order = self._service.update_order(pk, draft)
        except OrderNotFound:
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvalidOrder as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/orders/{pk}"""
        try:
            self._service.delete_order(pk)
        except OrderNotFound:
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_200_OK)

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="payment")
    def pay(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/orders/{pk}/payment?cardToken=...

        A declined charge answers 400; the order is still stored as
        ``PAYMENT_FAILED``.
        """
        params = PaymentQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        try:
            order = self._service.attempt_online_payment(
                pk, params.validated_data["cardToken"]
            )
        except OrderNotFound:
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        except (PaymentRejected, PaymentProcessingFailed) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="offline-payment")
    def offline_payment(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/orders/{pk}/offline-payment"""
        try:
            order = self._service.attempt_offline_payment(pk)
        except OrderNotFound:
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )
        except PaymentRejected as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status override
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/orders/{pk}/status?status=OPEN|FINISHED"""
        params = OrderStatusQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        try:
            order = self._service.set_status(pk, params.validated_data["status"])
        except OrderNotFound:
            return Response(
                {"detail": ORDER_NOT_FOUND},
                status=status.HTTP_404_NOT_FOUND,
            )

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_draft(request: Request) -> OrderDraftDTO | Response:
        serializer = OrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            return OrderDraftDTO(
                buyer_email=data["buyerEmail"],
                seat_letter=data.get("seatLetter"),
                seat_number=data.get("seatNumber"),
                items=[
                    OrderItemDTO(
                        product_id=item.get("productId"),
                        quantity=item.get("quantity"),
                    )
                    for item in data.get("items") or []
                ],
            )
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
