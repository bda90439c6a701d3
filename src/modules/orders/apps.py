from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            OrderAssigned,
            OrderCreated,
            OrderReordered,
            OrderReviewed,
            OrderStatusChanged,
        )
        from modules.orders.handlers import (
            order_assigned_handler,
            order_created_handler,
            order_reordered_handler,
            order_reviewed_handler,
            order_status_changed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_created_handler)
        event_bus.subscribe(OrderAssigned, order_assigned_handler)
        event_bus.subscribe(OrderReviewed, order_reviewed_handler)
        event_bus.subscribe(OrderStatusChanged, order_status_changed_handler)
        event_bus.subscribe(OrderReordered, order_reordered_handler)
