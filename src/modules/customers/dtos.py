"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``RegisterCustomerDTO``: input for self-service registration.
- ``CustomerIdentityDTO``: the opaque ``{id, name, email}`` identity
  consumed by checkout and returned by ``/customers/me/``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

if TYPE_CHECKING:
    from modules.customers.models import Customer

MIN_PASSWORD_LENGTH = 6


class RegisterCustomerDTO(BaseModel):
    """Immutable DTO for registration requests.

    Validates:
    - ``name`` is not blank (surrounding whitespace stripped).
    - ``email`` is well-formed; stored lowercase.
    - ``password`` has at least ``MIN_PASSWORD_LENGTH`` characters.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required.")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        return v


class CustomerIdentityDTO(BaseModel):
    """Resolved, authenticated customer identity."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str

    @classmethod
    def from_entity(cls, customer: Customer) -> CustomerIdentityDTO:
        return cls(id=customer.id, name=customer.name, email=customer.email)
