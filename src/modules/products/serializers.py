"""Catalog DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Keys are camelCase on the wire.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class ProductQuerySerializer(serializers.Serializer):
    """Validates ``?search=&category=&limit=&offset=&includeInactive=``."""

    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    category = serializers.IntegerField(required=False, min_value=1)
    includeInactive = serializers.BooleanField(
        source="include_inactive", required=False, default=False
    )
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=settings.ORDER_LIST_MAX_LIMIT,
        default=settings.ORDER_LIST_DEFAULT_LIMIT,
    )
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


class ProductInputSerializer(serializers.Serializer):
    """Shape of a product create (full) or update (``partial=True``) body.

    Value rules live on the DTOs.
    """

    name = serializers.CharField()
    price = serializers.IntegerField()
    description = serializers.CharField(required=False, allow_blank=True)
    categoryId = serializers.IntegerField(
        source="category_id", required=False, allow_null=True
    )
    stockQuantity = serializers.IntegerField(source="stock_quantity", required=False)
    imageUrl = serializers.URLField(
        source="image_url", required=False, allow_blank=True
    )
    sku = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    isActive = serializers.BooleanField(source="is_active", required=False)


class StockUpdateSerializer(serializers.Serializer):
    stockQuantity = serializers.IntegerField(source="stock_quantity")


class CategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField()
    slug = serializers.CharField()
    displayOrder = serializers.IntegerField(source="display_order", required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class ProductSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    categoryId = serializers.IntegerField(source="category_id", read_only=True)
    price = serializers.IntegerField(read_only=True)
    stockQuantity = serializers.IntegerField(source="stock_quantity", read_only=True)
    imageUrl = serializers.CharField(source="image_url", read_only=True)
    sku = serializers.CharField(read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)


class CategorySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    slug = serializers.CharField(read_only=True)
    displayOrder = serializers.IntegerField(source="display_order", read_only=True)
