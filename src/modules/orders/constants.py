"""Order domain constants.

Defines status choices, the valid status transitions of the order
state machine, and reference-code parameters.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


def source_statuses(target: str) -> set[str]:
    """Statuses from which *target* is reachable in one transition."""
    return {source for source, targets in VALID_TRANSITIONS.items() if target in targets}


# Uppercase letters and digits without 0, O, 1 and I.
REFERENCE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
REFERENCE_CODE_LENGTH = 8
REFERENCE_CODE_MAX_ATTEMPTS = 5

# Cart bounds; the order total must fit a signed 64-bit column.
MAX_ITEM_QUANTITY = 10_000
MAX_UNIT_PRICE = 1_000_000_000
MAX_ORDER_TOTAL = 2**63 - 1
