"""Domain events for the Orders module."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when checkout persists a new pending order."""


@dataclass(frozen=True)
class OrderCompleted(DomainEvent):
    """Raised when staff mark an order as paid and handed over."""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when staff cancel a pending order."""
