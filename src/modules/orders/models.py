"""Order model.

Business rules implemented:
- ``reference_code`` is unique at the database level; the constraint, not
  an application pre-check, is the collision authority.
- ``items`` is a JSON snapshot of the cart at checkout (name and unit
  price copied, never joined live to a catalog).  Every read validates it
  against ``LineItemDTO``.
- ``total_price`` is computed once at creation and never recomputed.
- Customer FK uses PROTECT to preserve order history.
- Status moves only ``pending -> completed`` or ``pending -> cancelled``
  (enforced by a conditional UPDATE in the repository).
"""

from __future__ import annotations

from functools import cached_property
from typing import List

from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import REFERENCE_CODE_LENGTH, OrderStatus
from modules.orders.dtos import LINE_ITEMS_ADAPTER, LineItemDTO


class Order(BaseModel):
    """Order aggregate root.

    ``reference_code`` is the short code a customer shows at pickup; ``id``
    is used for internal references.
    """

    reference_code: models.CharField = models.CharField(
        max_length=REFERENCE_CODE_LENGTH, unique=True, editable=False
    )
    customer: models.ForeignKey = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    items: models.JSONField = models.JSONField()
    total_price: models.PositiveBigIntegerField = models.PositiveBigIntegerField()
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    completed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    @cached_property
    def line_items(self) -> List[LineItemDTO]:
        """``items`` parsed and schema-checked.

        Raises ``pydantic.ValidationError`` for a malformed row.
        """
        return LINE_ITEMS_ADAPTER.validate_python(self.items)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.reference_code} ({self.status})"
