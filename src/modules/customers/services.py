"""Customer service layer (Use Cases).

Registration and identity resolution for storefront customers.  The
simplified-mode gate is injected; writes consult it first and reads
degrade to "no customer".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import structlog

from modules.core.policies import SimplifiedMode
from modules.customers.dtos import CustomerIdentityDTO
from modules.customers.exceptions import CustomerAlreadyExists, RegistrationDisabled

if TYPE_CHECKING:
    from modules.customers.dtos import RegisterCustomerDTO
    from modules.customers.models import Customer
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: ICustomerRepository,
        simplified_mode: Optional[SimplifiedMode] = None,
    ) -> None:
        self._repo = repository
        self._simplified = simplified_mode or SimplifiedMode()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def ensure_registration_open(self) -> None:
        """Raises ``RegistrationDisabled`` while simplified mode is on."""
        self._simplified.guard_write(
            "Customer registration is disabled in simplified mode.",
            error=RegistrationDisabled,
        )

    def register(self, dto: RegisterCustomerDTO) -> Customer:
        """Register a new customer account.

        Raises:
            RegistrationDisabled: simplified mode is on.
            CustomerAlreadyExists: the e-mail is already registered.
        """
        self.ensure_registration_open()

        if self._repo.get_by_email(dto.email):
            logger.warning("customer.duplicate_email")
            raise CustomerAlreadyExists("Email already registered.")

        customer = self._repo.create(
            name=dto.name, email=dto.email, password=dto.password
        )
        logger.info("customer.registered", customer_id=customer.id)
        return customer

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve_identity(self, user: Any) -> Optional[CustomerIdentityDTO]:
        """Map an authenticated Django user to its customer identity.

        Returns ``None`` for anonymous users, users without a customer
        profile (e.g. staff accounts) and whenever simplified mode is on.
        """
        if self._simplified.enabled:
            return None
        if user is None or not getattr(user, "is_authenticated", False):
            return None

        customer = self._repo.get_by_user_id(user.pk)
        if customer is None:
            return None
        return CustomerIdentityDTO.from_entity(customer)
