"""Every module mounts its routes under ``/api/v1/`` without clashing."""

import pytest
from django.urls import Resolver404, resolve, reverse

pytestmark = pytest.mark.integration


@pytest.mark.parametrize(
    "name, path",
    [
        ("checkout-list", "/api/v1/checkout/"),
        ("order-list", "/api/v1/orders/"),
        ("customer-register", "/api/v1/customers/register/"),
        ("product-list", "/api/v1/products/"),
        ("category-list", "/api/v1/categories/"),
    ],
)
def test_module_routes(name, path):
    assert reverse(name) == path


def test_no_router_root_view_at_api_prefix():
    with pytest.raises(Resolver404):
        resolve("/api/v1/")
