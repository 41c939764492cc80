"""Product DRF serializers for API input/output.

The wire format is camelCase; ``source=`` maps onto model attributes.
Business validation lives in the DTOs and the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductInputSerializer(serializers.Serializer):
    """Parses create/replace payloads."""

    name = serializers.CharField(max_length=255, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    imageUrl = serializers.URLField(
        max_length=1000, required=False, allow_null=True, allow_blank=True
    )
    categoryId = serializers.UUIDField(required=False, allow_null=True)


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    imageUrl = serializers.CharField(source="image_url", read_only=True)
    categoryId = serializers.UUIDField(source="category_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "imageUrl",
            "categoryId",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
