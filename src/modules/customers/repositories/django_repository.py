"""Django ORM implementation of the Customer repository.

Look-ups follow the Null Object pattern: they return ``None`` instead of
raising, and the Service Layer decides what a missing customer means.
Database failures surface as ``StoreError``.
"""

from __future__ import annotations

from typing import Optional

import structlog
from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction

from modules.core.exceptions import StoreError
from modules.customers.exceptions import CustomerAlreadyExists
from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Customer]:
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None
        except DatabaseError as exc:
            raise StoreError(f"Customer look-up failed: {exc}") from exc

    def get_by_email(self, email: str) -> Optional[Customer]:
        try:
            return Customer.objects.filter(email=email.strip().lower()).first()
        except DatabaseError as exc:
            raise StoreError(f"Customer look-up failed: {exc}") from exc

    def get_by_user_id(self, user_id: int) -> Optional[Customer]:
        try:
            return Customer.objects.filter(user_id=user_id).first()
        except DatabaseError as exc:
            raise StoreError(f"Customer look-up failed: {exc}") from exc

    def create(self, name: str, email: str, password: str) -> Customer:
        """Create ``User(username=email)`` and its ``Customer`` in one savepoint.

        Raises:
            CustomerAlreadyExists: the e-mail (or username) is already taken.
            StoreError: any other database failure.
        """
        User = get_user_model()
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=email, email=email, password=password
                )
                customer = Customer.objects.create(user=user, name=name, email=email)
        except IntegrityError as exc:
            raise CustomerAlreadyExists("Email already registered.") from exc
        except DatabaseError as exc:
            raise StoreError(f"Customer creation failed: {exc}") from exc

        logger.info("customer.saved", customer_id=customer.id)
        return customer
