"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import SimplifiedModeDisabled


class CustomerAlreadyExists(Exception):
    """A customer with the same e-mail is already registered."""


class RegistrationDisabled(SimplifiedModeDisabled):
    """Customer registration is switched off in simplified mode."""
