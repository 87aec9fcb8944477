import itertools

import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.customers.models import Customer
from modules.orders.models import Order
from modules.products.models import Category, Product

User = get_user_model()

_codes = itertools.count(1)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def make_customer():
    """Factory creating an auth user plus its customer profile."""

    def _make(name="Layla Hassan", email="layla@example.com", password="secret123"):
        user = User.objects.create_user(username=email, email=email, password=password)
        return Customer.objects.create(user=user, name=name, email=email)

    return _make


@pytest.fixture()
def customer(make_customer):
    return make_customer()


@pytest.fixture()
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer.user)
    return client


@pytest.fixture()
def staff_user():
    return User.objects.create_user(
        username="cashier", password="cashier-pass", is_staff=True
    )


@pytest.fixture()
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture()
def make_order(customer):
    """Factory persisting an order directly through the ORM."""

    def _make(status="pending", total_price=50000, owner=None, reference_code=None, **extra):
        code = reference_code or f"TEST{next(_codes):04d}"
        return Order.objects.create(
            customer=owner or customer,
            reference_code=code,
            items=[
                {
                    "product_id": 1,
                    "name": "Rice",
                    "quantity": 2,
                    "unit_price": total_price // 2,
                }
            ],
            total_price=total_price,
            status=status,
            **extra,
        )

    return _make


@pytest.fixture()
def make_category():
    def _make(name="Rice & Grains", slug="grains", display_order=4):
        return Category.objects.create(name=name, slug=slug, display_order=display_order)

    return _make


@pytest.fixture()
def make_product():
    """Factory persisting a catalog product directly through the ORM."""

    def _make(name="Rice 5kg", price=25000, **extra):
        return Product.objects.create(name=name, price=price, **extra)

    return _make
