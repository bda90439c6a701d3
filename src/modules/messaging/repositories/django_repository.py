"""Django ORM implementation of the Message repository."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from modules.messaging.models import Message
from modules.messaging.repositories.interfaces import IMessageRepository


class MessageDjangoRepository(IMessageRepository):
    @transaction.atomic
    def create(self, order_id: UUID, sender_id: UUID, text: str) -> Message:
        message = Message(order_id=order_id, sender_id=sender_id, text=text)
        message.save()
        return Message.objects.select_related("sender").get(pk=message.pk)

    def get_by_id(self, id: str) -> Optional[Message]:
        try:
            return Message.objects.select_related("sender").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list_for_order(self, order_id: UUID) -> List[Message]:
        return list(
            Message.objects.select_related("sender")
            .filter(order_id=order_id)
            .order_by("created_at", "id")
        )

    @transaction.atomic
    def save(self, entity: Message) -> Message:
        entity.save()
        return entity
