"""Order service layer (Use Cases).

``OrderService`` is the order lifecycle controller used by staff;
``CheckoutService`` turns a customer's cart into a ``pending`` order.

Business rules enforced:
- Every operation consults the simplified-mode gate first: writes raise,
  reads come back empty.
- Status moves only ``pending -> completed | cancelled``.  The repository's
  conditional UPDATE is the single place this is decided, so two racing
  staff devices cannot both transition the same order.
- Line items are snapshots of the cart; ``total_price`` is their exact
  integer sum, computed once.
- Reference-code collisions (and only those) are retried, at most
  ``REFERENCE_CODE_MAX_ATTEMPTS`` times.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

import structlog
from django.utils import timezone

from modules.core.policies import SimplifiedMode
from modules.orders.constants import (
    MAX_ORDER_TOTAL,
    REFERENCE_CODE_MAX_ATTEMPTS,
    VALID_TRANSITIONS,
    OrderStatus,
    source_statuses,
)
from modules.orders.dtos import (
    LineItemDTO,
    OrderListWithStatsDTO,
    OrderReceiptDTO,
    OrderStatsDTO,
)
from modules.orders.events import OrderCancelled, OrderCompleted, OrderPlaced
from modules.orders.exceptions import (
    EmptyCart,
    InvalidStatus,
    InvalidTransition,
    OrderingDisabled,
    OrderNotFound,
    OrderTotalTooLarge,
    ReferenceCodeConflict,
    ReferenceCodeExhausted,
    Unauthorized,
)
from modules.orders.reference_codes import generate_reference_code
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.customers.dtos import CustomerIdentityDTO
    from modules.orders.dtos import CartItemDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)

TARGET_STATUSES = frozenset(
    target for targets in VALID_TRANSITIONS.values() for target in targets
)


class OrderService:
    """Application service for the order lifecycle.

    Receives the repository, the simplified-mode gate and the event bus via
    constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        simplified_mode: Optional[SimplifiedMode] = None,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._simplified = simplified_mode or SimplifiedMode()
        self._event_bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def complete(self, order_id: int) -> Order:
        """Mark a pending order as paid and handed over.

        Raises:
            SimplifiedModeDisabled: simplified mode is on.
            OrderNotFound: order does not exist.
            InvalidTransition: order is no longer pending.
        """
        self._simplified.guard_write()
        now = timezone.now()
        order = self._transition(
            order_id, OrderStatus.COMPLETED, now=now, completed_at=now
        )
        self._event_bus.publish(OrderCompleted(aggregate_id=order.id))
        return order

    def cancel(self, order_id: int) -> Order:
        """Cancel a pending order; ``completed_at`` stays empty.

        Raises:
            SimplifiedModeDisabled: simplified mode is on.
            OrderNotFound: order does not exist.
            InvalidTransition: order is no longer pending.
        """
        self._simplified.guard_write()
        order = self._transition(order_id, OrderStatus.CANCELLED, now=timezone.now())
        self._event_bus.publish(OrderCancelled(aggregate_id=order.id))
        return order

    def apply_status(self, reference: str, new_status: str) -> Order:
        """Resolve *reference* and move it to *new_status* (``PATCH`` entry point).

        Raises:
            SimplifiedModeDisabled: simplified mode is on.
            InvalidStatus: *new_status* is not a reachable target.
            OrderNotFound: no order carries *reference*.
            InvalidTransition: order is no longer pending.
        """
        self._simplified.guard_write()
        if new_status not in TARGET_STATUSES:
            raise InvalidStatus("Invalid status")

        order = self._order_repo.get_by_reference_code(reference)
        if order is None:
            raise OrderNotFound("Order not found")

        if new_status == OrderStatus.COMPLETED:
            return self.complete(order.id)
        return self.cancel(order.id)

    def _transition(
        self, order_id: int, new_status: str, now, completed_at=None
    ) -> Order:
        log = logger.bind(order_id=order_id, new_status=new_status)

        order = self._order_repo.update_status(
            order_id,
            new_status,
            completed_at=completed_at,
            expected_statuses=source_statuses(new_status),
            updated_at=now,
        )
        if order is not None:
            log.info(f"order.{new_status}")
            return order

        current = self._order_repo.get_by_id(order_id)
        if current is None:
            raise OrderNotFound("Order not found")

        log.warning("order.invalid_transition", current_status=current.status)
        raise InvalidTransition("Order has already been processed")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_reference(self, reference: str) -> Order:
        """Retrieve an order (with its customer) by reference code.

        Raises:
            OrderNotFound: no such order, or simplified mode is on.
        """
        if self._simplified.enabled:
            raise OrderNotFound("Order not found")

        order = self._order_repo.get_by_reference_code(reference)
        if order is None:
            raise OrderNotFound("Order not found")
        return order

    def list_orders(
        self,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Order]:
        """Most recent orders first.

        Raises:
            InvalidStatus: *status* is given but is not a known status.
        """
        if self._simplified.enabled:
            return []
        if status is not None and status not in OrderStatus.values:
            raise InvalidStatus("Invalid status")
        return self._order_repo.list_orders(status=status, limit=limit, offset=offset)

    def get_stats(self) -> OrderStatsDTO:
        if self._simplified.enabled:
            return OrderStatsDTO()
        return self._order_repo.aggregate_stats()

    def list_with_stats(
        self,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> OrderListWithStatsDTO:
        return OrderListWithStatsDTO(
            orders=self.list_orders(status=status, limit=limit, offset=offset),
            stats=self.get_stats(),
        )

    def list_for_customer(self, customer_id: int) -> List[Order]:
        if self._simplified.enabled:
            return []
        return self._order_repo.list_by_customer(customer_id)


class CheckoutService:
    """Turns a signed-in customer's cart into a ``pending`` order."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        simplified_mode: Optional[SimplifiedMode] = None,
        code_generator: Optional[Callable[[], str]] = None,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._simplified = simplified_mode or SimplifiedMode()
        self._generate_code = code_generator or generate_reference_code
        self._event_bus = event_bus or default_event_bus

    def admit(
        self, customer: Optional[CustomerIdentityDTO]
    ) -> CustomerIdentityDTO:
        """Gate and identity checks, run before the cart is even parsed.

        Raises:
            OrderingDisabled: simplified mode is on.
            Unauthorized: no resolved customer identity.
        """
        self._simplified.guard_write(
            "Ordering is disabled in simplified mode.", error=OrderingDisabled
        )
        if customer is None:
            raise Unauthorized("Please sign in to checkout")
        return customer

    def checkout(
        self,
        customer: Optional[CustomerIdentityDTO],
        cart_items: Sequence[CartItemDTO],
    ) -> OrderReceiptDTO:
        """Place an order for *customer* and return its pickup receipt.

        Exactly one order row is written on success and none on failure.

        Raises:
            OrderingDisabled: simplified mode is on.
            Unauthorized: no resolved customer identity.
            EmptyCart: *cart_items* is empty.
            OrderTotalTooLarge: the total does not fit the price column.
            ReferenceCodeExhausted: every attempt hit a taken code.
            StoreError: any other store failure (not retried).
        """
        customer = self.admit(customer)
        if not cart_items:
            raise EmptyCart("Cart is empty")

        items = [LineItemDTO.from_cart_item(item) for item in cart_items]
        total_price = sum(item.subtotal for item in items)
        if total_price > MAX_ORDER_TOTAL:
            raise OrderTotalTooLarge("Order total is too large")

        log = logger.bind(customer_id=customer.id, total_price=total_price)
        order = self._insert_with_unique_code(customer.id, items, total_price, log)

        log.info("checkout.order_placed", order_id=order.id)
        self._event_bus.publish(OrderPlaced(aggregate_id=order.id))
        return OrderReceiptDTO.from_entity(order)

    def _insert_with_unique_code(self, customer_id, items, total_price, log) -> Order:
        for attempt in range(1, REFERENCE_CODE_MAX_ATTEMPTS + 1):
            code = self._generate_code()
            if self._order_repo.reference_code_exists(code):
                log.warning("checkout.reference_code_taken", attempt=attempt)
                continue
            try:
                return self._order_repo.insert(
                    customer_id=customer_id,
                    reference_code=code,
                    items=items,
                    total_price=total_price,
                )
            except ReferenceCodeConflict:
                log.warning("checkout.reference_code_collision", attempt=attempt)

        log.critical(
            "checkout.reference_codes_exhausted", attempts=REFERENCE_CODE_MAX_ATTEMPTS
        )
        raise ReferenceCodeExhausted(
            f"No free reference code after {REFERENCE_CODE_MAX_ATTEMPTS} attempts."
        )
