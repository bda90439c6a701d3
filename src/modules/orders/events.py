"""Domain events for the Orders bounded context.

Published on the in-process event bus after the producing transaction
commits.  Subscribers are the hook point for outbound notifications.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when a customer submits an order."""

    customer_id: Optional[UUID] = None


@dataclass(frozen=True)
class OrderAssigned(DomainEvent):
    """Raised when a technician claims an unassigned order."""

    technician_id: Optional[UUID] = None


@dataclass(frozen=True)
class OrderReviewed(DomainEvent):
    """Raised when a technician accepts or rejects a submitted order."""

    technician_id: Optional[UUID] = None
    action: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an assigned technician advances an order."""

    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderReordered(DomainEvent):
    """Raised when a delivered order is reordered (aggregate is the new order)."""

    original_order_id: Optional[UUID] = None
