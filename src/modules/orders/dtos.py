"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CartItemDTO``: one cart entry submitted at checkout.
- ``LineItemDTO``: the snapshot stored in ``Order.items``; also the
  schema every stored JSON row is validated against on read.
- ``OrderReceiptDTO``: checkout result.
- ``OrderStatsDTO`` / ``OrderListWithStatsDTO``: back-office dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from modules.orders.constants import MAX_ITEM_QUANTITY, MAX_UNIT_PRICE

if TYPE_CHECKING:
    from modules.orders.models import Order

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CartItemDTO(BaseModel):
    """Immutable DTO for a cart entry.

    Prices are whole currency units (the storefront currency has no
    subunits).
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str
    price: int = Field(ge=0, le=MAX_UNIT_PRICE)
    quantity: int

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Item name is required.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        if v > MAX_ITEM_QUANTITY:
            raise ValueError(f"Quantity must be at most {MAX_ITEM_QUANTITY}.")
        return v


# ---------------------------------------------------------------------------
# Stored snapshot
# ---------------------------------------------------------------------------


class LineItemDTO(BaseModel):
    """Immutable snapshot of a purchased product at checkout time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    product_id: int = Field(gt=0)
    name: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price: int = Field(ge=0)

    @property
    def subtotal(self) -> int:
        return self.unit_price * self.quantity

    @classmethod
    def from_cart_item(cls, item: CartItemDTO) -> LineItemDTO:
        return cls(
            product_id=item.id,
            name=item.name,
            quantity=item.quantity,
            unit_price=item.price,
        )


LINE_ITEMS_ADAPTER = TypeAdapter(List[LineItemDTO])


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderReceiptDTO(BaseModel):
    """What the customer needs to render a scannable pickup code."""

    model_config = ConfigDict(frozen=True)

    id: int
    reference_code: str
    total_price: int
    items: List[LineItemDTO]

    @classmethod
    def from_entity(cls, order: Order) -> OrderReceiptDTO:
        return cls(
            id=order.id,
            reference_code=order.reference_code,
            total_price=order.total_price,
            items=order.line_items,
        )


class OrderStatsDTO(BaseModel):
    """Per-status counts plus today's completed revenue."""

    model_config = ConfigDict(frozen=True)

    pending: int = 0
    completed: int = 0
    cancelled: int = 0
    today_revenue: int = 0


@dataclass(frozen=True)
class OrderListWithStatsDTO:
    """Most recent orders plus the dashboard stats block."""

    orders: List[Order]
    stats: OrderStatsDTO
