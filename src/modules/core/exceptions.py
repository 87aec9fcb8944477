"""Cross-module exceptions.

Raised below the API layer; views translate them into
``{"success": false, "message": ...}`` responses.
"""

from __future__ import annotations


class StoreError(Exception):
    """The relational store failed (constraint violation, connectivity, corrupt row).

    The message is for server-side logs only and must never reach a client.
    """


class SimplifiedModeDisabled(Exception):
    """A write was attempted while simplified (read-only demo) mode is on."""
