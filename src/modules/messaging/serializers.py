"""Message DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.messaging.models import Message
from modules.users.serializers import UserSummarySerializer


class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)

    class Meta:
        model = Message
        fields = ["id", "order_id", "sender_id", "sender", "text", "created_at"]
        read_only_fields = fields
