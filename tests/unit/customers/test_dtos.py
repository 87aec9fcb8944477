import pytest
from pydantic import ValidationError

from modules.customers.dtos import CustomerIdentityDTO, RegisterCustomerDTO

pytestmark = pytest.mark.unit


class TestRegisterCustomerDTO:
    def test_normalises_name_and_email(self):
        dto = RegisterCustomerDTO(
            name="  Layla Hassan ", email=" Layla@Example.COM ", password="secret123"
        )
        assert dto.name == "Layla Hassan"
        assert dto.email == "layla@example.com"

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"name": "   "}, "Name is required."),
            ({"password": "12345"}, "Password must be at least 6 characters."),
            ({"email": "not-an-email"}, "email"),
        ],
    )
    def test_rejects_invalid_input(self, overrides, message):
        data = {"name": "Layla", "email": "layla@example.com", "password": "secret123"}
        data.update(overrides)
        with pytest.raises(ValidationError, match=message):
            RegisterCustomerDTO(**data)


class TestCustomerIdentityDTO:
    def test_from_entity(self, customer):
        identity = CustomerIdentityDTO.from_entity(customer)
        assert identity == CustomerIdentityDTO(
            id=customer.id, name="Layla Hassan", email="layla@example.com"
        )
