"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Output keys are camelCase.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from modules.orders.constants import MAX_ITEM_QUANTITY, MAX_UNIT_PRICE

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CartItemSerializer(serializers.Serializer):
    """Validates a single cart entry in a checkout request."""

    id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(max_length=255)
    price = serializers.IntegerField(min_value=0, max_value=MAX_UNIT_PRICE)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_ITEM_QUANTITY)


class CheckoutSerializer(serializers.Serializer):
    """Validates the checkout payload.

    An empty or missing ``items`` list is accepted here; the service
    rejects it with ``EmptyCart``.
    """

    items = CartItemSerializer(many=True, required=False, default=list)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class OrderListQuerySerializer(serializers.Serializer):
    """Validates ``?status=&limit=&offset=`` for the back-office listing."""

    status = serializers.CharField(required=False, allow_blank=True)
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=settings.ORDER_LIST_MAX_LIMIT,
        default=settings.ORDER_LIST_DEFAULT_LIMIT,
    )
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class LineItemSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id", read_only=True)
    name = serializers.CharField(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    unitPrice = serializers.IntegerField(source="unit_price", read_only=True)


class CustomerSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    email = serializers.CharField(read_only=True)


class OrderReceiptSerializer(serializers.Serializer):
    """Renders an ``OrderReceiptDTO`` returned by checkout."""

    id = serializers.IntegerField(read_only=True)
    referenceCode = serializers.CharField(source="reference_code", read_only=True)
    totalPrice = serializers.IntegerField(source="total_price", read_only=True)
    items = LineItemSerializer(many=True, read_only=True)


class OrderSerializer(serializers.Serializer):
    """Full order view for staff, with the owning customer."""

    id = serializers.IntegerField(read_only=True)
    referenceCode = serializers.CharField(source="reference_code", read_only=True)
    totalPrice = serializers.IntegerField(source="total_price", read_only=True)
    status = serializers.CharField(read_only=True)
    items = LineItemSerializer(source="line_items", many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    completedAt = serializers.DateTimeField(source="completed_at", read_only=True)
    customer = CustomerSummarySerializer(read_only=True)


class CustomerOrderSerializer(serializers.Serializer):
    """A customer's own order history entry (no customer block)."""

    id = serializers.IntegerField(read_only=True)
    referenceCode = serializers.CharField(source="reference_code", read_only=True)
    totalPrice = serializers.IntegerField(source="total_price", read_only=True)
    status = serializers.CharField(read_only=True)
    items = LineItemSerializer(source="line_items", many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)


class OrderStatusSerializer(serializers.Serializer):
    """Result of a status change."""

    id = serializers.IntegerField(read_only=True)
    referenceCode = serializers.CharField(source="reference_code", read_only=True)
    status = serializers.CharField(read_only=True)


class OrderStatsSerializer(serializers.Serializer):
    pending = serializers.IntegerField(read_only=True)
    completed = serializers.IntegerField(read_only=True)
    cancelled = serializers.IntegerField(read_only=True)
    todayRevenue = serializers.IntegerField(source="today_revenue", read_only=True)
