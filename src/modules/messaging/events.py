"""Domain events for the Messaging bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class MessageSent(DomainEvent):
    """Raised when a message is posted; the aggregate is the message."""

    order_id: Optional[UUID] = None
    sender_id: Optional[UUID] = None
