"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderAssigned,
    OrderCreated,
    OrderReordered,
    OrderReviewed,
    OrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            customer_id=str(event.customer_id),
        )


class OrderAssignedHandler(IEventHandler[OrderAssigned]):
    def handle(self, event: OrderAssigned) -> None:
        logger.info(
            "order.event.assigned",
            order_id=str(event.aggregate_id),
            technician_id=str(event.technician_id),
        )


class OrderReviewedHandler(IEventHandler[OrderReviewed]):
    def handle(self, event: OrderReviewed) -> None:
        logger.info(
            "order.event.reviewed",
            order_id=str(event.aggregate_id),
            action=event.action,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


class OrderReorderedHandler(IEventHandler[OrderReordered]):
    def handle(self, event: OrderReordered) -> None:
        logger.info(
            "order.event.reordered",
            order_id=str(event.aggregate_id),
            original_order_id=str(event.original_order_id),
        )


order_created_handler = OrderCreatedHandler()
order_assigned_handler = OrderAssignedHandler()
order_reviewed_handler = OrderReviewedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_reordered_handler = OrderReorderedHandler()
