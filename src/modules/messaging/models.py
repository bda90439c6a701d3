"""Message model: a comment scoped to exactly one order."""

from django.db import models

from modules.core.models import BaseModel


class Message(BaseModel):
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="messages",
    )
    sender = models.ForeignKey(
        "users.UserProfile",
        on_delete=models.PROTECT,
        related_name="messages",
    )
    text = models.TextField()

    class Meta:
        db_table = "messages"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["order", "created_at"], name="messages_order_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Message {self.id} on order {self.order_id}"
