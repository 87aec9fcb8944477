from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from modules.core.exceptions import StoreError
from modules.customers.exceptions import CustomerAlreadyExists
from modules.customers.models import Customer
from modules.customers.repositories import CustomerDjangoRepository

pytestmark = pytest.mark.unit

User = get_user_model()


@pytest.fixture()
def repo():
    return CustomerDjangoRepository()


class TestCustomerDjangoRepository:
    def test_create_links_user_and_customer(self, repo):
        customer = repo.create(name="Omar", email="omar@example.com", password="secret123")

        assert customer.user.username == "omar@example.com"
        assert customer.user.check_password("secret123")
        assert repo.get_by_user_id(customer.user_id).pk == customer.pk

    def test_duplicate_email_rolls_back_user(self, repo, customer):
        users_before = User.objects.count()

        with pytest.raises(CustomerAlreadyExists):
            repo.create(name="Other", email=customer.email, password="secret123")

        assert User.objects.count() == users_before
        assert Customer.objects.count() == 1

    def test_get_by_email_is_case_insensitive(self, repo, customer):
        assert repo.get_by_email(" LAYLA@example.com ").pk == customer.pk
        assert repo.get_by_email("nobody@example.com") is None

    def test_get_by_id(self, repo, customer):
        assert repo.get_by_id(customer.pk).pk == customer.pk
        assert repo.get_by_id(999999) is None

    def test_database_error_is_store_error(self, repo):
        with patch.object(
            Customer.objects, "filter", side_effect=DatabaseError("connection lost")
        ):
            with pytest.raises(StoreError):
                repo.get_by_email("layla@example.com")
