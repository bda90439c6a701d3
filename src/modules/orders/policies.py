"""Order Access Policy.

A single table maps ``(role, intent)`` to the relationship the principal
must have with the order.  A missing entry means the role may never
perform the intent; default is deny.

=============  ==============  =============================================
role           intent          rule
=============  ==============  =============================================
customer       create          always (owner is forced to the principal)
customer       read            order.customer == principal
customer       create_message  order.customer == principal
customer       reorder         order.customer == principal
technician     read            order unassigned or assigned to principal
technician     create_message  order unassigned or assigned to principal
technician     assign          always (claim exclusivity is a store concern)
technician     review          always (first committed review wins)
technician     advance_status  order assigned to principal
=============  ==============  =============================================

``can_access`` is pure.  ``ensure_role`` / ``ensure_access`` raise
``OrderForbidden`` with the message clients see.  For listings the same
rules degrade to ``visibility_filter``, a query predicate evaluated by
the store.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from django.db.models import Q

from modules.orders.exceptions import OrderForbidden
from modules.users.constants import UserRole

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.users.principal import Principal


class Intent(str, Enum):
    CREATE = "create"
    READ = "read"
    CREATE_MESSAGE = "create_message"
    ASSIGN = "assign"
    REVIEW = "review"
    ADVANCE_STATUS = "advance_status"
    REORDER = "reorder"


Rule = Callable[["Principal", Optional["Order"]], bool]


def _always(principal: Principal, order: Optional[Order]) -> bool:
    return True


def _owns(principal: Principal, order: Optional[Order]) -> bool:
    return order is not None and order.customer_id == principal.id


def _unassigned_or_holds(principal: Principal, order: Optional[Order]) -> bool:
    return order is not None and (
        order.technician_id is None or order.technician_id == principal.id
    )


def _holds_assignment(principal: Principal, order: Optional[Order]) -> bool:
    return order is not None and order.technician_id == principal.id


POLICY: dict[tuple[UserRole, Intent], Rule] = {
    (UserRole.CUSTOMER, Intent.CREATE): _always,
    (UserRole.CUSTOMER, Intent.READ): _owns,
    (UserRole.CUSTOMER, Intent.CREATE_MESSAGE): _owns,
    (UserRole.CUSTOMER, Intent.REORDER): _owns,
    (UserRole.TECHNICIAN, Intent.READ): _unassigned_or_holds,
    (UserRole.TECHNICIAN, Intent.CREATE_MESSAGE): _unassigned_or_holds,
    (UserRole.TECHNICIAN, Intent.ASSIGN): _always,
    (UserRole.TECHNICIAN, Intent.REVIEW): _always,
    (UserRole.TECHNICIAN, Intent.ADVANCE_STATUS): _holds_assignment,
}

# Shown when the role can never perform the intent.
ROLE_DENIED: dict[Intent, str] = {
    Intent.CREATE: "Only customers can create orders",
    Intent.READ: "You do not have permission to access this order",
    Intent.CREATE_MESSAGE: "You do not have permission to message on this order",
    Intent.ASSIGN: "Only technicians can assign orders",
    Intent.REVIEW: "Only technicians can review orders",
    Intent.ADVANCE_STATUS: "Only technicians can update order status",
    Intent.REORDER: "Only customers can reorder",
}

# Shown when the role may perform the intent but not on this order.
RELATION_DENIED: dict[Intent, str] = {
    Intent.READ: "You do not have permission to access this order",
    Intent.CREATE_MESSAGE: "You do not have permission to message on this order",
    Intent.ADVANCE_STATUS: "You can only update status of orders assigned to you",
    Intent.REORDER: "You can only reorder your own orders",
}


def role_permits(role: UserRole, intent: Intent) -> bool:
    """Whether *role* may ever perform *intent*, regardless of the order."""
    return (role, intent) in POLICY


def can_access(principal: Principal, order: Optional[Order], intent: Intent) -> bool:
    """Decide whether *principal* may perform *intent* on *order*."""
    rule = POLICY.get((principal.role, intent))
    return rule is not None and rule(principal, order)


def ensure_role(principal: Principal, intent: Intent) -> None:
    if not role_permits(principal.role, intent):
        raise OrderForbidden(ROLE_DENIED[intent])


def ensure_access(
    principal: Principal,
    order: Order,
    intent: Intent,
    message: Optional[str] = None,
) -> None:
    """Raise ``OrderForbidden`` unless ``can_access`` allows the intent.

    *message* overrides the default relationship-denied text (used by the
    messaging gate, which words read denials differently).
    """
    if can_access(principal, order, intent):
        return
    if message is None:
        if role_permits(principal.role, intent):
            message = RELATION_DENIED.get(intent, ROLE_DENIED[intent])
        else:
            message = ROLE_DENIED[intent]
    raise OrderForbidden(message)


def visibility_filter(principal: Principal) -> Q:
    """Query predicate equivalent to ``can_access(principal, o, READ)``."""
    if principal.role == UserRole.CUSTOMER:
        return Q(customer_id=principal.id)
    if principal.role == UserRole.TECHNICIAN:
        return Q(technician_id=principal.id) | Q(technician__isnull=True)
    return Q(pk__in=[])
