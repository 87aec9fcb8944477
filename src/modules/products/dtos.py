"""Catalog DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO`` / ``UpdateProductDTO``: staff edits.
- ``ProductDTO``: what the storefront renders, from a row or from the
  simplified-mode fallback catalog.
- ``CreateCategoryDTO`` / ``UpdateCategoryDTO`` / ``CategoryDTO``.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import MAX_UNIT_PRICE

if TYPE_CHECKING:
    from modules.products.models import Category, Product


def _clean_sku(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    return v.strip().upper() or None


# ---------------------------------------------------------------------------
# Product input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=255)
    price: int = Field(ge=0, le=MAX_UNIT_PRICE)
    description: str = ""
    category_id: Optional[int] = Field(default=None, gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    image_url: str = ""
    sku: Optional[str] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name is required.")
        return v

    @field_validator("sku")
    @classmethod
    def normalise_sku(cls, v: Optional[str]) -> Optional[str]:
        return _clean_sku(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    Only fields present in the request are applied; ``category_id`` and
    ``sku`` may be sent as ``null`` to clear them.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[int] = Field(default=None, ge=0, le=MAX_UNIT_PRICE)
    description: Optional[str] = None
    category_id: Optional[int] = Field(default=None, gt=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    sku: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("sku")
    @classmethod
    def normalise_sku(cls, v: Optional[str]) -> Optional[str]:
        return _clean_sku(v)

    def changes(self) -> dict:
        """Fields the caller supplied, ``None`` allowed only where clearable."""
        data = self.model_dump(exclude_unset=True)
        return {
            field: value
            for field, value in data.items()
            if value is not None or field in ("category_id", "sku")
        }


# ---------------------------------------------------------------------------
# Product output DTO
# ---------------------------------------------------------------------------


class ProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str = ""
    category_id: Optional[int] = None
    price: int
    stock_quantity: int = 0
    image_url: str = ""
    sku: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductDTO:
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category_id=product.category_id,
            price=product.price,
            stock_quantity=product.stock_quantity,
            image_url=product.image_url,
            sku=product.sku,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name or description."""
        term = term.lower()
        return term in self.name.lower() or term in self.description.lower()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class CreateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    display_order: int = Field(default=0, ge=0)


class UpdateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(
        default=None, min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$"
    )
    display_order: Optional[int] = Field(default=None, ge=0)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class CategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    slug: str
    display_order: int

    @classmethod
    def from_entity(cls, category: Category) -> CategoryDTO:
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            display_order=category.display_order,
        )
