"""Pickup reference codes.

Codes are 8 symbols drawn independently from a 32-symbol alphabet with
the ``secrets`` CSPRNG (32**8, about 1.1e12 codes).  Uniqueness is not
guaranteed here: ``CheckoutService`` retries against the store's unique
constraint.
"""

from __future__ import annotations

import secrets

from modules.orders.constants import REFERENCE_CODE_ALPHABET, REFERENCE_CODE_LENGTH


def generate_reference_code() -> str:
    return "".join(
        secrets.choice(REFERENCE_CODE_ALPHABET) for _ in range(REFERENCE_CODE_LENGTH)
    )


def normalize_reference_code(code: str) -> str:
    """Canonical form used for every look-up (codes are case-insensitive)."""
    return code.strip().upper()
