"""Event handlers for Orders domain events.

The back-office order list is rendered from the database on every
request, so handlers only record the change in the structured log.
"""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCancelled, OrderCompleted, OrderPlaced
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info(
            f"Order {event.aggregate_id} placed, awaiting pickup",
            order_id=event.aggregate_id,
            event_id=str(event.event_id),
        )


class OrderCompletedHandler(IEventHandler[OrderCompleted]):
    def handle(self, event: OrderCompleted) -> None:
        logger.info(
            f"Order {event.aggregate_id} completed at pickup",
            order_id=event.aggregate_id,
            event_id=str(event.event_id),
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            f"Order {event.aggregate_id} cancelled",
            order_id=event.aggregate_id,
            event_id=str(event.event_id),
        )


order_placed_handler = OrderPlacedHandler()
order_completed_handler = OrderCompletedHandler()
order_cancelled_handler = OrderCancelledHandler()
