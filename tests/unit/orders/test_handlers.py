import logging

import pytest

from modules.orders.events import OrderCancelled, OrderCompleted, OrderPlaced
from modules.orders.handlers import (
    order_cancelled_handler,
    order_completed_handler,
    order_placed_handler,
)
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


class TestOrderEventHandlers:
    @pytest.mark.parametrize(
        "handler, event, text",
        [
            (order_placed_handler, OrderPlaced(aggregate_id=11), "placed"),
            (order_completed_handler, OrderCompleted(aggregate_id=12), "completed"),
            (order_cancelled_handler, OrderCancelled(aggregate_id=13), "cancelled"),
        ],
    )
    def test_handler_logs_event(self, caplog, handler, event, text):
        with caplog.at_level(logging.INFO):
            handler.handle(event)

        messages = [r.getMessage() for r in caplog.records]
        assert any(f"Order {event.aggregate_id} {text}" in m for m in messages)

    def test_handlers_subscribed_at_startup(self, caplog):
        with caplog.at_level(logging.INFO):
            event_bus.publish(OrderCompleted(aggregate_id=21))

        assert any("Order 21 completed" in r.getMessage() for r in caplog.records)
