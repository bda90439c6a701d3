"""Order domain constants.

Defines the status choices and the order state machine::

    submitted --review(accept)--> accepted --> in_production --> shipped --> delivered
    submitted --review(reject)--> rejected

``submitted`` leaves only through review; ``ADVANCE_TRANSITIONS`` holds
the single forward edge for every status that advances via status
updates.  ``delivered`` and ``rejected`` are terminal.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    SUBMITTED = "submitted", "Submitted"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"
    IN_PRODUCTION = "in_production", "In production"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"


class ReviewAction(models.TextChoices):
    ACCEPT = "accept", "Accept"
    REJECT = "reject", "Reject"


# Keyed by plain values so lookups by a model field value always match.
ADVANCE_TRANSITIONS: dict[str, tuple[str, ...]] = {
    OrderStatus.ACCEPTED.value: (OrderStatus.IN_PRODUCTION.value,),
    OrderStatus.IN_PRODUCTION.value: (OrderStatus.SHIPPED.value,),
    OrderStatus.SHIPPED.value: (OrderStatus.DELIVERED.value,),
}

# Statuses a client may request through ``PUT /orders/:id/status``.
ADVANCE_TARGETS: tuple[str, ...] = (
    OrderStatus.IN_PRODUCTION.value,
    OrderStatus.SHIPPED.value,
    OrderStatus.DELIVERED.value,
)

TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.DELIVERED.value, OrderStatus.REJECTED.value}
)

REORDERABLE_STATES: frozenset[str] = frozenset({OrderStatus.DELIVERED.value})

PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2
