"""Catalog models: categories and the products shelved under them.

Business rules implemented:
- ``Category.slug`` is unique; categories list by ``display_order``.
- ``Product.sku`` is optional but unique when set, stored uppercase.
- Prices are whole currency units, like order totals.
- Deleting a category leaves its products uncategorised.
- Orders keep their own snapshot of name and price, so editing or
  deleting a product never touches a placed order.
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Category(BaseModel):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True)
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "categories"
        ordering = ["display_order", "id"]

    def __str__(self) -> str:
        return self.name


class Product(BaseModel):
    """Catalog entry a customer can add to the cart."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    price = models.PositiveIntegerField()
    stock_quantity = models.PositiveIntegerField(default=0)
    image_url = models.URLField(max_length=500, blank=True, default="")
    sku = models.CharField(max_length=64, unique=True, null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["is_active"], name="products_active_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        self.sku = (self.sku or "").strip().upper() or None
        super().save(*args, **kwargs)
        if is_new:
            logger.info("product_created", product_id=self.id, sku=self.sku)

    def __str__(self) -> str:
        return f"{self.sku or '-'} - {self.name}"
