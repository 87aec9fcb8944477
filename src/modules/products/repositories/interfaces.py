"""Catalog repository interfaces.

Extend ``IRepository[T]`` with the look-ups the storefront and the back
office need.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Category, Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for catalog products."""

    @abstractmethod
    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Product]:
        """Newest first.  *filters* keys: ``search``, ``category``,
        ``category_slug``, ``active``."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU (case-insensitive)."""

    @abstractmethod
    def save(self, entity: Product) -> Product:
        """Insert or update; a taken SKU raises ``ProductAlreadyExists``."""

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Delete by id; ``False`` when nothing matched."""


class ICategoryRepository(IRepository["Category"]):
    """Repository contract for catalog categories."""

    @abstractmethod
    def list(self) -> List[Category]:
        """All categories by ``display_order``."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Category]:
        """Retrieve a category by slug."""

    @abstractmethod
    def save(self, entity: Category) -> Category:
        """Insert or update; a taken slug raises ``CategoryAlreadyExists``."""

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Delete by id; ``False`` when nothing matched."""
