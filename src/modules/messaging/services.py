"""Messaging Gate.

Sending and listing both resolve the order first, then apply the order
read rule: whoever may see the order may read and post on its thread,
and nobody else.  Messages are never filtered by sender.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

import structlog
from django.db import transaction
from pydantic import ValidationError as PydanticValidationError

from modules.messaging.dtos import SendMessageDTO
from modules.messaging.events import MessageSent
from modules.messaging.exceptions import (
    LIST_FORBIDDEN,
    SEND_FORBIDDEN,
    MessageValidationError,
)
from modules.orders.exceptions import OrderNotFound
from modules.orders.policies import Intent, ensure_access
from shared.infrastructure.bus import event_bus as default_event_bus, publish_on_commit

if TYPE_CHECKING:
    from modules.messaging.models import Message
    from modules.messaging.repositories.interfaces import IMessageRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.users.principal import Principal
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class MessageService:
    """Application service for order messages (repositories injected)."""

    def __init__(
        self,
        message_repository: IMessageRepository,
        order_repository: IOrderRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._message_repo = message_repository
        self._order_repo = order_repository
        self._event_bus = event_bus or default_event_bus

    def _gated_order(
        self, principal: Principal, order_id: str, intent: Intent, message: str
    ) -> Order:
        order = self._order_repo.get_by_id(str(order_id))
        if order is None:
            raise OrderNotFound()
        ensure_access(principal, order, intent, message)
        return order

    @transaction.atomic
    def send_message(
        self, principal: Principal, order_id: str, payload: Any
    ) -> Message:
        """Post a message on an order the principal may see.

        Raises:
            OrderNotFound: order does not exist.
            OrderForbidden: principal may not see the order.
            MessageValidationError: text missing or blank.
        """
        order = self._gated_order(
            principal, order_id, Intent.CREATE_MESSAGE, SEND_FORBIDDEN
        )
        if not hasattr(payload, "get"):
            raise MessageValidationError()
        try:
            dto = SendMessageDTO(text=payload.get("text"))
        except PydanticValidationError as exc:
            raise MessageValidationError.from_pydantic(exc) from exc

        message = self._message_repo.create(order.id, principal.id, dto.text)
        logger.info(
            "message.sent",
            message_id=str(message.id),
            order_id=str(order.id),
            sender_id=str(principal.id),
        )
        event = MessageSent(
            aggregate_id=message.id, order_id=order.id, sender_id=principal.id
        )
        publish_on_commit(self._event_bus, event)
        return message

    def list_messages(self, principal: Principal, order_id: str) -> List[Message]:
        """Chronological thread of an order; empty is a valid result.

        Raises:
            OrderNotFound: order does not exist.
            OrderForbidden: principal may not see the order.
        """
        order = self._gated_order(principal, order_id, Intent.READ, LIST_FORBIDDEN)
        return self._message_repo.list_for_order(order.id)
