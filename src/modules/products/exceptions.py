"""Catalog domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
``{"success": false, "message": ...}`` responses.
"""

from __future__ import annotations

from modules.core.exceptions import SimplifiedModeDisabled


class ProductNotFound(Exception):
    """The requested product does not exist."""


class ProductAlreadyExists(Exception):
    """Another product already carries the SKU."""


class CategoryNotFound(Exception):
    """The requested category does not exist."""


class CategoryAlreadyExists(Exception):
    """Another category already carries the slug."""


class CatalogReadOnly(SimplifiedModeDisabled):
    """Catalog edits are switched off in simplified mode."""
