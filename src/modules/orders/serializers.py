"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from typing import Any, Optional

from rest_framework import serializers

from modules.orders.models import Order
from modules.users.serializers import UserSummarySerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation payload (JSON or multipart).

    ``imageKey`` is accepted as an alias of ``image_key``; ``image`` is an
    optional uploaded file (multipart only).
    """

    description = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)
    image_key = serializers.CharField(
        max_length=512, required=False, allow_null=True, allow_blank=True
    )
    image = serializers.FileField(required=False, allow_empty_file=False)

    def to_internal_value(self, data: Any) -> Any:
        if hasattr(data, "get") and data.get("imageKey") and not data.get("image_key"):
            data = {key: data.get(key) for key in data}
            data["image_key"] = data.pop("imageKey")
        return super().to_internal_value(data)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders.

    ``image_url`` comes from the ``image_urls`` context mapping
    (order id -> URL) the view resolves outside the transaction; a
    missing entry renders as ``null``.
    """

    customer = UserSummarySerializer(read_only=True)
    technician = UserSummarySerializer(read_only=True, allow_null=True)
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "description",
            "quantity",
            "status",
            "price",
            "feedback",
            "image_key",
            "image_url",
            "original_order_id",
            "customer_id",
            "technician_id",
            "customer",
            "technician",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_image_url(self, obj: Order) -> Optional[str]:
        return self.context.get("image_urls", {}).get(obj.id)
