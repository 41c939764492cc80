"""Category DRF serializers (camelCase wire format)."""

from __future__ import annotations

from rest_framework import serializers

from modules.categories.models import Category


class CategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(
        max_length=1000, required=False, allow_blank=True, allow_null=True
    )
    parentId = serializers.UUIDField(required=False, allow_null=True)


class CategorySerializer(serializers.ModelSerializer):
    """Read serializer; ``subcategoryIds`` is derived from the reverse relation."""

    parentId = serializers.UUIDField(source="parent_id", read_only=True)
    subcategoryIds = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "description",
            "parentId",
            "subcategoryIds",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_subcategoryIds(self, obj: Category) -> list[str]:
        return [str(child.id) for child in obj.subcategories.all()]
