"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
``{"success": false, "message": ...}`` responses.
"""

from __future__ import annotations

from modules.core.exceptions import SimplifiedModeDisabled


class Unauthorized(Exception):
    """Checkout was attempted without a resolved customer identity."""


class EmptyCart(Exception):
    """Checkout was attempted with no cart items."""


class InvalidStatus(Exception):
    """The requested status is not a known target status."""


class InvalidTransition(Exception):
    """The order is not in a state that allows the requested transition."""


class OrderNotFound(Exception):
    """The requested order does not exist."""


class OrderingDisabled(SimplifiedModeDisabled):
    """Checkout is switched off in simplified mode."""


class ReferenceCodeConflict(Exception):
    """The store rejected an insert because the reference code is taken.

    Internal signal for the checkout retry loop; never surfaced to clients.
    """


class ReferenceCodeExhausted(Exception):
    """Every reference-code attempt collided; the store needs attention."""


class OrderTotalTooLarge(Exception):
    """The cart's total does not fit the stored price column."""
