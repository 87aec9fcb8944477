import pytest
from pydantic import ValidationError

from modules.orders.constants import MAX_UNIT_PRICE
from modules.products.dtos import (
    CreateCategoryDTO,
    CreateProductDTO,
    ProductDTO,
    UpdateProductDTO,
)
from modules.products.fallback import FALLBACK_PRODUCTS, FALLBACK_RECORDS

pytestmark = pytest.mark.unit


class TestCreateProductDTO:
    def test_defaults_and_normalisation(self):
        dto = CreateProductDTO(name="  Rice 5kg ", price=25000, sku=" rice-5kg ")

        assert dto.name == "Rice 5kg"
        assert dto.sku == "RICE-5KG"
        assert dto.is_active is True
        assert dto.stock_quantity == 0
        assert dto.category_id is None

    def test_blank_sku_is_none(self):
        assert CreateProductDTO(name="Rice", price=1, sku="   ").sku is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "   "},
            {"price": -1},
            {"price": MAX_UNIT_PRICE + 1},
            {"stock_quantity": -1},
            {"category_id": 0},
        ],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ValidationError):
            CreateProductDTO(**{"name": "Rice", "price": 25000, **overrides})


class TestUpdateProductDTO:
    def test_changes_only_supplied_fields(self):
        dto = UpdateProductDTO(price=26000)
        assert dto.changes() == {"price": 26000}

    def test_null_clears_category_and_sku(self):
        dto = UpdateProductDTO(category_id=None, sku=None, name=None)
        assert dto.changes() == {"category_id": None, "sku": None}

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            UpdateProductDTO(stock_quantity=-3)


class TestCreateCategoryDTO:
    def test_slug_pattern(self):
        assert CreateCategoryDTO(name="Dairy", slug="dairy").display_order == 0
        with pytest.raises(ValidationError):
            CreateCategoryDTO(name="Dairy", slug="Dairy Stuff")


class TestFallbackCatalog:
    def test_one_entry_per_record(self):
        assert [p.id for p in FALLBACK_PRODUCTS] == [r[0] for r in FALLBACK_RECORDS]

    def test_newest_first_and_uncategorised(self):
        stamps = [p.created_at for p in FALLBACK_PRODUCTS]
        assert stamps == sorted(stamps, reverse=True)
        assert all(p.category_id is None and p.is_active for p in FALLBACK_PRODUCTS)

    def test_matches_name_or_description(self):
        rice = FALLBACK_PRODUCTS[0]
        assert isinstance(rice, ProductDTO)
        assert rice.matches("RICE")
        assert rice.matches("long-grain")
        assert not rice.matches("tea")
