"""Static catalog served while simplified mode is on.

Simplified deployments have no usable store, so the storefront shows this
fixed shelf instead.  Entries are listed newest first and carry no
category.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List

from modules.products.dtos import ProductDTO

# (id, name, description, price in IQD, stock, sku)
FALLBACK_RECORDS = [
    (1, "Rice 5kg", "Long-grain white rice.", 25000, 40, "RICE-5KG"),
    (2, "Black Tea 500g", "Loose-leaf Ceylon tea.", 6000, 60, "TEA-500G"),
    (3, "Sunflower Oil 1.8L", "Refined cooking oil.", 7500, 35, "OIL-1800"),
    (4, "Sugar 2kg", "White granulated sugar.", 4000, 50, "SUGAR-2KG"),
    (5, "Lentils 1kg", "Red split lentils.", 3000, 45, "LENT-1KG"),
    (6, "Tomato Paste", "Double-concentrated, 400g tin.", 1500, 80, "TOMP-400"),
    (7, "Flat Bread (10)", "Baked fresh every morning.", 1000, 25, "BREAD-10"),
    (8, "Dates 1kg", "Barhi dates from Basra.", 8000, 20, "DATES-1KG"),
    (9, "Yogurt 1kg", "Full-fat set yogurt.", 2500, 30, "YOG-1KG"),
    (10, "Eggs (30)", "Tray of thirty fresh eggs.", 6500, 15, "EGGS-30"),
]

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _build() -> List[ProductDTO]:
    products = []
    for index, (pid, name, description, price, stock, sku) in enumerate(
        FALLBACK_RECORDS
    ):
        stamp = _EPOCH - timedelta(seconds=index)
        products.append(
            ProductDTO(
                id=pid,
                name=name,
                description=description,
                price=price,
                stock_quantity=stock,
                sku=sku,
                created_at=stamp,
                updated_at=stamp,
            )
        )
    return products


FALLBACK_PRODUCTS: List[ProductDTO] = _build()
