"""Django ORM implementation of the catalog repositories.

Look-ups follow the Null Object pattern and return ``None`` for missing
rows.  Unique violations become the matching ``...AlreadyExists`` error;
every other ``DatabaseError`` leaves this module as ``StoreError``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import DatabaseError, IntegrityError, transaction

from modules.core.exceptions import StoreError
from modules.products.exceptions import CategoryAlreadyExists, ProductAlreadyExists
from modules.products.filters import ProductFilter
from modules.products.models import Category, Product
from modules.products.repositories.interfaces import (
    ICategoryRepository,
    IProductRepository,
)

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None
        except DatabaseError as exc:
            raise StoreError(f"Product look-up failed: {exc}") from exc

    def get_by_sku(self, sku: str) -> Optional[Product]:
        try:
            return Product.objects.filter(sku=sku.strip().upper()).first()
        except DatabaseError as exc:
            raise StoreError(f"Product look-up failed: {exc}") from exc

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Product]:
        """List products through ``ProductFilter``.

        Examples of valid filters::

            {"active": True}
            {"search": "rice", "category_slug": "grains"}
        """
        filterset = ProductFilter(
            data=filters or {},
            queryset=Product.objects.order_by("-created_at", "-id"),
        )
        if not filterset.is_valid():
            raise ValueError(f"Invalid product filters: {dict(filterset.errors)}")
        try:
            return list(filterset.qs[offset : offset + limit])
        except DatabaseError as exc:
            raise StoreError(f"Product listing failed: {exc}") from exc

    def save(self, entity: Product) -> Product:
        try:
            with transaction.atomic():
                entity.save()
        except IntegrityError as exc:
            if "sku" in str(exc):
                raise ProductAlreadyExists(
                    f"SKU '{entity.sku}' already registered."
                ) from exc
            raise StoreError(f"Product save failed: {exc}") from exc
        except DatabaseError as exc:
            raise StoreError(f"Product save failed: {exc}") from exc

        logger.info("product.saved", product_id=entity.id, sku=entity.sku)
        return entity

    def delete(self, id: int) -> bool:
        try:
            deleted, _ = Product.objects.filter(id=id).delete()
        except DatabaseError as exc:
            raise StoreError(f"Product delete failed: {exc}") from exc
        if deleted:
            logger.info("product.deleted", product_id=id)
        return bool(deleted)


class CategoryDjangoRepository(ICategoryRepository):
    """Concrete Category repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Category]:
        try:
            return Category.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None
        except DatabaseError as exc:
            raise StoreError(f"Category look-up failed: {exc}") from exc

    def get_by_slug(self, slug: str) -> Optional[Category]:
        try:
            return Category.objects.filter(slug=slug).first()
        except DatabaseError as exc:
            raise StoreError(f"Category look-up failed: {exc}") from exc

    def list(self) -> List[Category]:
        try:
            return list(Category.objects.order_by("display_order", "id"))
        except DatabaseError as exc:
            raise StoreError(f"Category listing failed: {exc}") from exc

    def save(self, entity: Category) -> Category:
        try:
            with transaction.atomic():
                entity.save()
        except IntegrityError as exc:
            raise CategoryAlreadyExists(
                f"Category slug '{entity.slug}' already exists."
            ) from exc
        except DatabaseError as exc:
            raise StoreError(f"Category save failed: {exc}") from exc

        logger.info("category.saved", category_id=entity.id, slug=entity.slug)
        return entity

    def delete(self, id: int) -> bool:
        try:
            deleted, _ = Category.objects.filter(id=id).delete()
        except DatabaseError as exc:
            raise StoreError(f"Category delete failed: {exc}") from exc
        if deleted:
            logger.info("category.deleted", category_id=id)
        return bool(deleted)
