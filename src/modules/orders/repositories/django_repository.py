"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

- ``insert`` runs in its own savepoint so a unique violation on
  ``reference_code`` leaves any outer transaction usable for the retry.
- ``update_status`` is a single ``UPDATE ... WHERE`` so two racing
  transitions cannot both succeed.
- Every ``DatabaseError`` leaves this module as ``StoreError``; the
  stored ``items`` JSON is validated on read and a malformed row is a
  ``StoreError`` too.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

import structlog
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone
from pydantic import ValidationError

from modules.core.exceptions import StoreError
from modules.orders.constants import OrderStatus
from modules.orders.dtos import LineItemDTO, OrderStatsDTO
from modules.orders.exceptions import ReferenceCodeConflict
from modules.orders.models import Order
from modules.orders.reference_codes import normalize_reference_code
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _checked(orders: Iterable[Order]) -> List[Order]:
    """Materialise *orders*, validating every row's line items."""
    result = []
    for order in orders:
        try:
            order.line_items
        except ValidationError as exc:
            logger.error("order.corrupt_items", order_id=order.id)
            raise StoreError(f"Order {order.id} has malformed items.") from exc
        result.append(order)
    return result


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def insert(
        self,
        customer_id: int,
        reference_code: str,
        items: List[LineItemDTO],
        total_price: int,
    ) -> Order:
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    customer_id=customer_id,
                    reference_code=reference_code,
                    items=[item.model_dump() for item in items],
                    total_price=total_price,
                    status=OrderStatus.PENDING,
                )
        except IntegrityError as exc:
            if "reference_code" in str(exc):
                raise ReferenceCodeConflict(reference_code) from exc
            raise StoreError(f"Order insert failed: {exc}") from exc
        except (DatabaseError, OverflowError) as exc:
            raise StoreError(f"Order insert failed: {exc}") from exc

        logger.info(
            "order.inserted",
            order_id=order.id,
            item_count=len(items),
            total_price=total_price,
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def reference_code_exists(self, code: str) -> bool:
        try:
            return Order.objects.filter(
                reference_code=normalize_reference_code(code)
            ).exists()
        except DatabaseError as exc:
            raise StoreError(f"Reference code look-up failed: {exc}") from exc

    def get_by_id(self, id: int) -> Optional[Order]:
        try:
            order = Order.objects.select_related("customer").filter(id=id).first()
        except (ValueError, TypeError):
            return None
        except DatabaseError as exc:
            raise StoreError(f"Order look-up failed: {exc}") from exc
        return _checked([order])[0] if order else None

    def get_by_reference_code(self, code: str) -> Optional[Order]:
        try:
            order = (
                Order.objects.select_related("customer")
                .filter(reference_code=normalize_reference_code(code))
                .first()
            )
        except DatabaseError as exc:
            raise StoreError(f"Order look-up failed: {exc}") from exc
        return _checked([order])[0] if order else None

    def list_orders(
        self,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Order]:
        queryset = Order.objects.select_related("customer").order_by(
            "-created_at", "-id"
        )
        if status:
            queryset = queryset.filter(status=status)
        try:
            return _checked(queryset[offset : offset + limit])
        except DatabaseError as exc:
            raise StoreError(f"Order listing failed: {exc}") from exc

    def list_by_customer(self, customer_id: int) -> List[Order]:
        queryset = Order.objects.filter(customer_id=customer_id).order_by(
            "-created_at", "-id"
        )
        try:
            return _checked(queryset)
        except DatabaseError as exc:
            raise StoreError(f"Order listing failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_status(
        self,
        id: int,
        new_status: str,
        *,
        completed_at: Optional[datetime] = None,
        expected_statuses: Optional[Iterable[str]] = None,
        updated_at: Optional[datetime] = None,
    ) -> Optional[Order]:
        # QuerySet.update() bypasses save(), so updated_at is set here.
        queryset = Order.objects.filter(id=id)
        if expected_statuses is not None:
            queryset = queryset.filter(status__in=list(expected_statuses))

        try:
            matched = queryset.update(
                status=new_status,
                completed_at=completed_at,
                updated_at=updated_at or timezone.now(),
            )
        except DatabaseError as exc:
            raise StoreError(f"Order status update failed: {exc}") from exc

        if not matched:
            return None

        logger.info("order.status_written", order_id=id, status=new_status)
        return self.get_by_id(id)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def aggregate_stats(self, now: Optional[datetime] = None) -> OrderStatsDTO:
        """Counts per status and today's completed revenue.

        "Today" runs from local midnight to the next local midnight in
        ``TIME_ZONE``.
        """
        local_now = timezone.localtime(now or timezone.now())
        day_start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
        day_end = day_start + timedelta(days=1)

        try:
            totals = Order.objects.aggregate(
                pending=Count("id", filter=Q(status=OrderStatus.PENDING)),
                completed=Count("id", filter=Q(status=OrderStatus.COMPLETED)),
                cancelled=Count("id", filter=Q(status=OrderStatus.CANCELLED)),
                today_revenue=Sum(
                    "total_price",
                    filter=Q(
                        status=OrderStatus.COMPLETED,
                        created_at__gte=day_start,
                        created_at__lt=day_end,
                    ),
                ),
            )
        except DatabaseError as exc:
            raise StoreError(f"Order stats failed: {exc}") from exc

        return OrderStatsDTO(
            pending=totals["pending"] or 0,
            completed=totals["completed"] or 0,
            cancelled=totals["cancelled"] or 0,
            today_revenue=totals["today_revenue"] or 0,
        )
