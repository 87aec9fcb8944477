"""Order repository interface.

Extends ``IRepository[Order]`` with the store operations checkout and
the back office need.  No business policy lives behind this contract:
the "only from pending" rule reaches the store as ``expected_statuses``
on a conditional update.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import LineItemDTO, OrderStatsDTO
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def insert(
        self,
        customer_id: int,
        reference_code: str,
        items: List[LineItemDTO],
        total_price: int,
    ) -> Order:
        """Persist a new ``pending`` order.

        Raises ``ReferenceCodeConflict`` when the reference code is
        already taken and ``StoreError`` for any other store failure.
        """

    @abstractmethod
    def reference_code_exists(self, code: str) -> bool:
        """Cheap pre-check; the unique constraint remains authoritative."""

    @abstractmethod
    def get_by_reference_code(self, code: str) -> Optional[Order]:
        """Retrieve an order (customer joined) by normalised reference code."""

    @abstractmethod
    def list_orders(
        self,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Order]:
        """Most recent orders first, optionally filtered by status."""

    @abstractmethod
    def list_by_customer(self, customer_id: int) -> List[Order]:
        """A customer's orders, most recent first."""

    @abstractmethod
    def update_status(
        self,
        id: int,
        new_status: str,
        *,
        completed_at: Optional[datetime] = None,
        expected_statuses: Optional[Iterable[str]] = None,
        updated_at: Optional[datetime] = None,
    ) -> Optional[Order]:
        """Write ``status`` (and ``completed_at``) in a single UPDATE.

        With ``expected_statuses`` the write only applies while the row is
        in one of them.  ``updated_at`` defaults to the current time.
        Returns the updated order, or ``None`` when no row matched.
        """

    @abstractmethod
    def aggregate_stats(self, now: Optional[datetime] = None) -> OrderStatsDTO:
        """Per-status counts plus revenue of orders completed today."""
