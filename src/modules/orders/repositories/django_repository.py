"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Concurrency control on assignment, review and status updates uses
guarded ``UPDATE ... WHERE`` statements: the guard (``technician IS
NULL``, ``status = 'submitted'``, ``status = <from>``) is evaluated by
the database at write time, so of two racing writers exactly one
matches the row.  ``QuerySet.update`` bypasses ``auto_now``; each
update sets ``updated_at`` itself.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.policies import visibility_filter
from modules.orders.repositories.interfaces import IOrderRepository
from modules.users.principal import Principal

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _alive(self) -> QuerySet:
        return Order.objects.alive().select_related("customer", "technician")

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(
            customer_id=data["customer_id"],
            description=data["description"],
            quantity=data["quantity"],
            image_key=data.get("image_key"),
            original_order_id=data.get("original_order_id"),
            status=OrderStatus.SUBMITTED,
        )
        order.save()
        logger.info("order.inserted", order_id=str(order.id))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent, deleted or malformed IDs."""
        try:
            return self._alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def visible_to(
        self, principal: Principal, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet:
        queryset = self._alive().filter(visibility_filter(principal))
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("-created_at", "-id")

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        return entity

    # ------------------------------------------------------------------
    # Conditional updates
    # ------------------------------------------------------------------

    def claim(self, order_id: UUID, technician_id: UUID) -> bool:
        updated = (
            Order.objects.alive()
            .filter(id=order_id, technician__isnull=True)
            .update(technician_id=technician_id, updated_at=timezone.now())
        )
        return updated == 1

    def apply_review(
        self,
        order_id: UUID,
        status: str,
        technician_id: UUID,
        price: Optional[Decimal] = None,
        feedback: Optional[str] = None,
    ) -> bool:
        updated = (
            Order.objects.alive()
            .filter(id=order_id, status=OrderStatus.SUBMITTED)
            .update(
                status=status,
                price=price,
                feedback=feedback,
                technician_id=technician_id,
                updated_at=timezone.now(),
            )
        )
        return updated == 1

    def advance(
        self,
        order_id: UUID,
        from_status: str,
        to_status: str,
        technician_id: UUID,
    ) -> bool:
        updated = (
            Order.objects.alive()
            .filter(id=order_id, status=from_status, technician_id=technician_id)
            .update(status=to_status, updated_at=timezone.now())
        )
        return updated == 1
