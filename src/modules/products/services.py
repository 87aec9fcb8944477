"""Catalog service layer (Use Cases).

``ProductService`` serves the storefront shelf and the back-office
product editor; ``CategoryService`` does the same for categories.

Business rules enforced:
- Simplified mode is consulted first: the shelf comes from the static
  fallback catalog, categories come back empty and every edit raises
  ``CatalogReadOnly``.
- The public shelf lists active products only.
- A product can only be filed under an existing category.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog

from modules.core.policies import SimplifiedMode
from modules.products.dtos import CategoryDTO, ProductDTO
from modules.products.exceptions import (
    CatalogReadOnly,
    CategoryNotFound,
    ProductNotFound,
)
from modules.products.fallback import FALLBACK_PRODUCTS
from modules.products.models import Category, Product

if TYPE_CHECKING:
    from modules.products.dtos import (
        CreateCategoryDTO,
        CreateProductDTO,
        UpdateCategoryDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import (
        ICategoryRepository,
        IProductRepository,
    )

logger = structlog.get_logger(__name__)

PRODUCTS_READ_ONLY = "Simplified mode is enabled. Products are read-only."
CATEGORIES_READ_ONLY = "Simplified mode is enabled. Categories are read-only."


class ProductService:
    """Application service for catalog products.

    Receives the repositories and the simplified-mode gate via constructor
    injection (DIP).
    """

    def __init__(
        self,
        product_repository: IProductRepository,
        category_repository: ICategoryRepository,
        simplified_mode: Optional[SimplifiedMode] = None,
    ) -> None:
        self._repo = product_repository
        self._categories = category_repository
        self._simplified = simplified_mode or SimplifiedMode()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        category_slug: Optional[str] = None,
        active_only: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ProductDTO]:
        """Newest products first, optionally narrowed by search or category."""
        if self._simplified.enabled:
            return self._fallback_shelf(
                search, category_id or category_slug, active_only, limit, offset
            )

        filters = {}
        if search:
            filters["search"] = search
        if category_id:
            filters["category"] = category_id
        if category_slug:
            filters["category_slug"] = category_slug
        if active_only:
            filters["active"] = True

        products = self._repo.list(filters, limit=limit, offset=offset)
        return [ProductDTO.from_entity(product) for product in products]

    def get_product(self, id: int) -> ProductDTO:
        """Raises ``ProductNotFound``."""
        if self._simplified.enabled:
            for product in FALLBACK_PRODUCTS:
                if product.id == id:
                    return product
            raise ProductNotFound("Product not found")

        return ProductDTO.from_entity(self._get(id))

    @staticmethod
    def _fallback_shelf(search, category, active_only, limit, offset):
        # The fallback shelf has no categories.
        if category:
            return []
        shelf = [p for p in FALLBACK_PRODUCTS if p.is_active or not active_only]
        if search:
            shelf = [p for p in shelf if p.matches(search)]
        return shelf[offset : offset + limit]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> ProductDTO:
        """Add a product to the catalog.

        Raises:
            CatalogReadOnly: simplified mode is on.
            CategoryNotFound: ``category_id`` names no category.
            ProductAlreadyExists: the SKU is taken.
        """
        self.ensure_writable()
        self._check_category(dto.category_id)

        product = self._repo.save(Product(**dto.model_dump()))
        logger.info("product.created", product_id=product.id)
        return ProductDTO.from_entity(product)

    def update_product(self, id: int, dto: UpdateProductDTO) -> ProductDTO:
        """Apply the supplied fields.

        Raises:
            CatalogReadOnly: simplified mode is on.
            ProductNotFound: no such product.
            CategoryNotFound: ``category_id`` names no category.
            ProductAlreadyExists: the new SKU is taken.
        """
        self.ensure_writable()
        product = self._get(id)
        changes = dto.changes()
        if "category_id" in changes:
            self._check_category(changes["category_id"])

        for field, value in changes.items():
            setattr(product, field, value)
        product = self._repo.save(product)
        logger.info("product.updated", product_id=id, fields=sorted(changes))
        return ProductDTO.from_entity(product)

    def toggle_active(self, id: int) -> ProductDTO:
        """Flip ``is_active``; inactive products drop off the public shelf."""
        self.ensure_writable()
        product = self._get(id)
        product.is_active = not product.is_active
        product = self._repo.save(product)
        logger.info("product.toggled", product_id=id, is_active=product.is_active)
        return ProductDTO.from_entity(product)

    def delete_product(self, id: int) -> None:
        """Placed orders keep their snapshot of the product."""
        self.ensure_writable()
        if not self._repo.delete(id):
            raise ProductNotFound("Product not found")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def ensure_writable(self) -> None:
        """Raises ``CatalogReadOnly`` while simplified mode is on."""
        self._simplified.guard_write(PRODUCTS_READ_ONLY, error=CatalogReadOnly)

    def _get(self, id: int) -> Product:
        product = self._repo.get_by_id(id)
        if product is None:
            raise ProductNotFound("Product not found")
        return product

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self._categories.get_by_id(category_id) is None:
            raise CategoryNotFound("Category not found")


class CategoryService:
    """Application service for catalog categories."""

    def __init__(
        self,
        category_repository: ICategoryRepository,
        simplified_mode: Optional[SimplifiedMode] = None,
    ) -> None:
        self._repo = category_repository
        self._simplified = simplified_mode or SimplifiedMode()

    def list_categories(self) -> List[CategoryDTO]:
        if self._simplified.enabled:
            return []
        return [CategoryDTO.from_entity(c) for c in self._repo.list()]

    def get_by_slug(self, slug: str) -> CategoryDTO:
        """Raises ``CategoryNotFound`` (always, in simplified mode)."""
        category = None if self._simplified.enabled else self._repo.get_by_slug(slug)
        if category is None:
            raise CategoryNotFound("Category not found")
        return CategoryDTO.from_entity(category)

    def create_category(self, dto: CreateCategoryDTO) -> CategoryDTO:
        """Raises ``CatalogReadOnly``, ``CategoryAlreadyExists``."""
        self.ensure_writable()
        category = self._repo.save(Category(**dto.model_dump()))
        logger.info("category.created", category_id=category.id)
        return CategoryDTO.from_entity(category)

    def update_category(self, slug: str, dto: UpdateCategoryDTO) -> CategoryDTO:
        self.ensure_writable()
        category = self._get(slug)
        for field, value in dto.changes().items():
            setattr(category, field, value)
        return CategoryDTO.from_entity(self._repo.save(category))

    def delete_category(self, slug: str) -> None:
        """Products filed under the category become uncategorised."""
        self.ensure_writable()
        category = self._get(slug)
        if not self._repo.delete(category.id):
            raise CategoryNotFound("Category not found")

    def ensure_writable(self) -> None:
        """Raises ``CatalogReadOnly`` while simplified mode is on."""
        self._simplified.guard_write(CATEGORIES_READ_ONLY, error=CatalogReadOnly)

    def _get(self, slug: str) -> Category:
        category = self._repo.get_by_slug(slug)
        if category is None:
            raise CategoryNotFound("Category not found")
        return category
