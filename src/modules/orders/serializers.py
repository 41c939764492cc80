"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.

Input fields are permissive about seat, items and quantities so that the
order validator reports composition errors with its own messages.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import MAX_QUANTITY, MAX_SEAT_NUMBER, OrderStatus
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderItemInputSerializer(serializers.Serializer):
    """Parses a single requested line."""

    productId = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.IntegerField(
        max_value=MAX_QUANTITY, required=False, allow_null=True
    )


class OrderInputSerializer(serializers.Serializer):
    """Parses create/replace payloads."""

    buyerEmail = serializers.EmailField(max_length=254)
    seatLetter = serializers.CharField(
        max_length=2, required=False, allow_null=True, allow_blank=True
    )
    seatNumber = serializers.IntegerField(
        max_value=MAX_SEAT_NUMBER, required=False, allow_null=True
    )
    items = OrderItemInputSerializer(
        many=True, required=False, allow_null=True, allow_empty=True
    )


class OrderStatusQuerySerializer(serializers.Serializer):
    """Parses ``?status=`` for the administrative override."""

    status = serializers.ChoiceField(choices=OrderStatus.choices)


class PaymentQuerySerializer(serializers.Serializer):
    """Parses ``?cardToken=`` for online payment."""

    cardToken = serializers.CharField(max_length=255, allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with product price snapshot."""

    productId = serializers.UUIDField(source="product_id", read_only=True)
    productName = serializers.CharField(source="product.name", read_only=True)
    unitPrice = serializers.DecimalField(
        source="unit_price", max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "productId",
            "productName",
            "quantity",
            "unitPrice",
            "subtotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items."""

    buyerEmail = serializers.EmailField(source="buyer_email", read_only=True)
    seatLetter = serializers.CharField(source="seat_letter", read_only=True)
    seatNumber = serializers.IntegerField(source="seat_number", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    totalPrice = serializers.DecimalField(
        source="total_price", max_digits=10, decimal_places=2, read_only=True
    )
    paymentStatus = serializers.CharField(source="payment_status", read_only=True)
    paymentGateway = serializers.CharField(source="payment_gateway", read_only=True)
    cardToken = serializers.CharField(source="card_token", read_only=True)
    paymentDate = serializers.DateTimeField(source="payment_date", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "buyerEmail",
            "seatLetter",
            "seatNumber",
            "items",
            "totalPrice",
            "status",
            "paymentStatus",
            "paymentGateway",
            "cardToken",
            "paymentDate",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
