"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups needed to resolve an
authenticated user into a customer and to keep e-mails unique.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by (lowercase) e-mail address."""

    @abstractmethod
    def get_by_user_id(self, user_id: int) -> Optional[Customer]:
        """Retrieve the customer profile linked to an auth user."""

    @abstractmethod
    def create(self, name: str, email: str, password: str) -> Customer:
        """Create the auth user and the customer profile atomically."""
