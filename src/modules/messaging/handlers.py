"""Event handlers for Messaging domain events."""

from __future__ import annotations

import structlog

from modules.messaging.events import MessageSent
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class MessageSentHandler(IEventHandler[MessageSent]):
    def handle(self, event: MessageSent) -> None:
        logger.info(
            "message.event.sent",
            message_id=str(event.aggregate_id),
            order_id=str(event.order_id),
            sender_id=str(event.sender_id),
        )


message_sent_handler = MessageSentHandler()
