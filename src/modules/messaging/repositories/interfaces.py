"""Message repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.messaging.models import Message


class IMessageRepository(IRepository["Message"]):
    @abstractmethod
    def create(self, order_id: UUID, sender_id: UUID, text: str) -> Message:
        """Insert a message on an order."""

    @abstractmethod
    def list_for_order(self, order_id: UUID) -> List[Message]:
        """All messages of an order, oldest first."""
