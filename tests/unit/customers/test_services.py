"""Unit tests for CustomerService.

Covers:
- register: happy path, duplicate e-mail, simplified mode.
- resolve_identity: anonymous, staff without profile, customer, simplified.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from modules.core.exceptions import SimplifiedModeDisabled
from modules.core.policies import SimplifiedMode
from modules.customers.dtos import CustomerIdentityDTO, RegisterCustomerDTO
from modules.customers.exceptions import CustomerAlreadyExists, RegistrationDisabled
from modules.customers.models import Customer
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit

DTO = RegisterCustomerDTO(name="Layla", email="layla@example.com", password="secret123")


@pytest.fixture()
def mock_repo():
    return MagicMock()


@pytest.fixture()
def service(mock_repo):
    return CustomerService(repository=mock_repo)


def _user(pk=1, authenticated=True):
    return SimpleNamespace(pk=pk, is_authenticated=authenticated)


class TestRegister:
    def test_creates_customer(self, service, mock_repo):
        mock_repo.get_by_email.return_value = None
        mock_repo.create.return_value = Customer(id=3, name="Layla", email=DTO.email)

        customer = service.register(DTO)

        assert customer.id == 3
        mock_repo.create.assert_called_once_with(
            name="Layla", email="layla@example.com", password="secret123"
        )

    def test_duplicate_email(self, service, mock_repo):
        mock_repo.get_by_email.return_value = Customer(id=1, email=DTO.email)

        with pytest.raises(CustomerAlreadyExists):
            service.register(DTO)
        mock_repo.create.assert_not_called()

    def test_disabled_in_simplified_mode(self, mock_repo):
        service = CustomerService(mock_repo, SimplifiedMode(enabled=True))

        with pytest.raises(RegistrationDisabled) as exc_info:
            service.register(DTO)

        assert isinstance(exc_info.value, SimplifiedModeDisabled)
        assert mock_repo.method_calls == []

    def test_registration_open_by_default(self, service):
        service.ensure_registration_open()

    def test_registration_closed_in_simplified_mode(self, mock_repo):
        service = CustomerService(mock_repo, SimplifiedMode(enabled=True))
        with pytest.raises(RegistrationDisabled):
            service.ensure_registration_open()


class TestResolveIdentity:
    def test_anonymous(self, service, mock_repo):
        assert service.resolve_identity(_user(authenticated=False)) is None
        assert service.resolve_identity(None) is None
        mock_repo.get_by_user_id.assert_not_called()

    def test_user_without_customer_profile(self, service, mock_repo):
        mock_repo.get_by_user_id.return_value = None
        assert service.resolve_identity(_user()) is None

    def test_customer(self, service, mock_repo):
        mock_repo.get_by_user_id.return_value = Customer(
            id=7, name="Layla", email="layla@example.com"
        )

        identity = service.resolve_identity(_user(pk=42))

        assert identity == CustomerIdentityDTO(id=7, name="Layla", email="layla@example.com")
        mock_repo.get_by_user_id.assert_called_once_with(42)

    def test_hidden_in_simplified_mode(self, mock_repo):
        service = CustomerService(mock_repo, SimplifiedMode(enabled=True))
        assert service.resolve_identity(_user()) is None
        assert mock_repo.method_calls == []
