"""Message URL configuration (nested under orders)."""

from __future__ import annotations

from django.urls import path

from modules.messaging.views import OrderMessageViewSet

order_messages = OrderMessageViewSet.as_view({"get": "list", "post": "create"})

urlpatterns = [
    path("orders/<str:order_id>/messages", order_messages, name="order-messages"),
]
