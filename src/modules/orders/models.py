"""Order model.

Field groups:
- Immutable on create: ``description``, ``quantity``, ``customer``
  (always the creating principal) and ``original_order`` (set when the
  order was created by reordering a delivered order).
- Workflow fields, mutated only by ``OrderService``: ``status``,
  ``technician``, and the review outcome: ``price`` (accept) or
  ``feedback`` (reject), never both.
- ``image_key``: opaque reference to an asset in external storage.

The database enforces what it can of the invariants: positive quantity,
positive price, and price/feedback mutual exclusion.  Foreign keys use
PROTECT because orders are only ever soft-deleted.
"""

from __future__ import annotations

from typing import Optional

from django.db import models

from modules.core.models import SoftDeleteModel
from modules.orders.constants import (
    ADVANCE_TRANSITIONS,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    TERMINAL_STATES,
    OrderStatus,
)


class Order(SoftDeleteModel):
    """Order aggregate root."""

    description = models.TextField()
    quantity = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.SUBMITTED,
    )
    price = models.DecimalField(
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
        null=True,
        blank=True,
    )
    feedback = models.TextField(null=True, blank=True)  # noqa: DJ001
    image_key = models.CharField(  # noqa: DJ001
        max_length=512,
        null=True,
        blank=True,
    )
    customer = models.ForeignKey(
        "users.UserProfile",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    technician = models.ForeignKey(
        "users.UserProfile",
        on_delete=models.PROTECT,
        related_name="assigned_orders",
        null=True,
        blank=True,
    )
    original_order = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        related_name="reorders",
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="orders_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price__isnull=True) | models.Q(price__gt=0),
                name="orders_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price__isnull=True) | models.Q(feedback__isnull=True),
                name="orders_price_xor_feedback",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return str(self.status) in TERMINAL_STATES

    @property
    def is_reviewed(self) -> bool:
        return self.status != OrderStatus.SUBMITTED

    @property
    def is_assigned(self) -> bool:
        return self.technician_id is not None

    def allowed_next_statuses(self) -> list[str]:
        """Statuses reachable through a status update from the current one."""
        return list(ADVANCE_TRANSITIONS.get(str(self.status), ()))

    def can_advance_to(self, new_status: str) -> bool:
        return new_status in self.allowed_next_statuses()

    def is_assigned_to(self, profile_id: Optional[object]) -> bool:
        return self.technician_id is not None and self.technician_id == profile_id

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"
