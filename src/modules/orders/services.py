"""Order service layer (Order Lifecycle Engine).

Orchestrates the order workflow: creation, technician claim, the
one-time review, forward status updates and reorders.  Every operation
receives an already-resolved ``Principal`` and checks, in order:

1. role gate (``Forbidden``)
2. order existence (``OrderNotFound``)
3. relationship gate (``Forbidden``)
4. state checks (``InvalidState`` / ``InvalidOrderState``) and the
   request payload (``Validation``); status updates read the payload
   before the state check, review and reorder after it
5. transition legality (``InvalidTransition``)

Mutations go through the repository's guarded updates.  When a guard
fails the order is re-read and the caller gets the precise conflict
(``AlreadyAssigned`` / ``InvalidState``), never a generic write error.
Domain events are published after the surrounding transaction commits.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar
from uuid import UUID

import structlog
from django.db import transaction
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from modules.orders.constants import REORDERABLE_STATES
from modules.orders.dtos import AdvanceStatusDTO, ReorderDTO, ReviewOrderDTO
from modules.orders.events import (
    OrderAssigned,
    OrderCreated,
    OrderReordered,
    OrderReviewed,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    AlreadyAssigned,
    InvalidOrderState,
    InvalidState,
    InvalidTransition,
    OrderNotFound,
    OrderValidationError,
)
from modules.orders.policies import Intent, ensure_access, ensure_role
from shared.infrastructure.bus import event_bus as default_event_bus, publish_on_commit

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.users.principal import Principal
    from shared.domain.bus import IEventBus
    from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)

D = TypeVar("D", bound=BaseModel)

ALREADY_REVIEWED = "Order has already been reviewed"
NOT_ADVANCEABLE = "Cannot update status from current order state"


def _parse(dto_class: Type[D], payload: Any) -> D:
    if not isinstance(payload, Mapping):
        raise OrderValidationError()
    # QueryDict (form bodies) flattens to its last value per key.
    data = payload.dict() if hasattr(payload, "dict") else dict(payload)
    try:
        return dto_class.model_validate(data)
    except PydanticValidationError as exc:
        raise OrderValidationError.from_pydantic(exc) from exc


class OrderService:
    """Application service for Order use-cases.

    Receives the repository and event bus via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._event_bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, principal: Principal, dto: CreateOrderDTO) -> Order:
        """Create a ``submitted`` order owned by the principal.

        Raises:
            OrderForbidden: principal is not a customer.
        """
        ensure_role(principal, Intent.CREATE)

        order = self._order_repo.create(
            {
                "customer_id": principal.id,
                "description": dto.description,
                "quantity": dto.quantity,
                "image_key": dto.image_key,
            }
        )
        logger.info(
            "order.created",
            order_id=str(order.id),
            customer_id=str(principal.id),
            has_image=order.image_key is not None,
        )
        self._publish(OrderCreated(aggregate_id=order.id, customer_id=principal.id))
        return self._reload(order.id)

    @transaction.atomic
    def assign_order(self, principal: Principal, order_id: str) -> Order:
        """Claim an unassigned order for the calling technician.

        Raises:
            OrderForbidden: principal is not a technician.
            OrderNotFound: order does not exist.
            AlreadyAssigned: the order already has a technician, or a
                concurrent claim committed first.
        """
        ensure_role(principal, Intent.ASSIGN)
        order = self.get_order_for(principal, order_id, Intent.ASSIGN)
        log = logger.bind(order_id=str(order.id), technician_id=str(principal.id))

        if order.is_assigned:
            log.warning("order.assign_conflict", holder_id=str(order.technician_id))
            raise AlreadyAssigned.for_claimant(order.is_assigned_to(principal.id))

        if not self._order_repo.claim(order.id, principal.id):
            current = self._reload(order.id)
            log.warning("order.assign_conflict", holder_id=str(current.technician_id))
            raise AlreadyAssigned.for_claimant(current.is_assigned_to(principal.id))

        log.info("order.assigned")
        self._publish(OrderAssigned(aggregate_id=order.id, technician_id=principal.id))
        return self._reload(order.id)

    @transaction.atomic
    def review_order(
        self, principal: Principal, order_id: str, payload: Mapping[str, Any]
    ) -> Order:
        """Accept (with price) or reject (with feedback) a submitted order.

        The reviewing technician becomes the assignee.  The review is
        recorded only if the order is still ``submitted`` when the write
        lands; the first committed review wins.

        Raises:
            OrderForbidden: principal is not a technician.
            OrderNotFound: order does not exist.
            InvalidState: the order was already reviewed.
            OrderValidationError: bad action, missing price or feedback.
        """
        ensure_role(principal, Intent.REVIEW)
        order = self.get_order_for(principal, order_id, Intent.REVIEW)
        log = logger.bind(order_id=str(order.id), technician_id=str(principal.id))

        if order.is_reviewed:
            log.warning("order.review_conflict", current_status=order.status)
            raise InvalidState(ALREADY_REVIEWED)

        dto = _parse(ReviewOrderDTO, payload)
        new_status = dto.resulting_status

        applied = self._order_repo.apply_review(
            order.id,
            status=new_status,
            technician_id=principal.id,
            price=dto.price,
            feedback=dto.feedback,
        )
        if not applied:
            current = self._reload(order.id)
            log.warning("order.review_conflict", current_status=current.status)
            raise InvalidState(ALREADY_REVIEWED)

        log.info("order.reviewed", action=str(dto.action), new_status=str(new_status))
        self._publish(
            OrderReviewed(
                aggregate_id=order.id,
                technician_id=principal.id,
                action=str(dto.action),
            )
        )
        return self._reload(order.id)

    @transaction.atomic
    def update_status(
        self, principal: Principal, order_id: str, payload: Mapping[str, Any]
    ) -> Order:
        """Advance an order along its single forward edge.

        Raises:
            OrderForbidden: principal is not the assigned technician.
            OrderNotFound: order does not exist.
            InvalidState: current status never advances this way
                (submitted, rejected, delivered).
            OrderValidationError: requested status is not a forward status.
            InvalidTransition: requested status is not the next one.
        """
        ensure_role(principal, Intent.ADVANCE_STATUS)
        order = self.get_order_for(principal, order_id, Intent.ADVANCE_STATUS)
        dto = _parse(AdvanceStatusDTO, payload)
        allowed = order.allowed_next_statuses()
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if not allowed:
            log.warning("order.status_not_advanceable")
            raise InvalidState(NOT_ADVANCEABLE)

        if not order.can_advance_to(dto.status):
            log.warning("order.invalid_transition", new_status=dto.status)
            raise InvalidTransition(order.status, dto.status, allowed)

        old_status = order.status
        if not self._order_repo.advance(order.id, old_status, dto.status, principal.id):
            current = self._reload(order.id)
            log.warning("order.status_conflict", actual_status=current.status)
            ensure_access(principal, current, Intent.ADVANCE_STATUS)
            if not current.allowed_next_statuses():
                raise InvalidState(NOT_ADVANCEABLE)
            raise InvalidTransition(
                current.status, dto.status, current.allowed_next_statuses()
            )

        log.info("order.status_updated", new_status=dto.status)
        self._publish(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=str(old_status),
                new_status=dto.status,
            )
        )
        return self._reload(order.id)

    @transaction.atomic
    def reorder(
        self, principal: Principal, order_id: str, payload: Mapping[str, Any]
    ) -> Order:
        """Create a new submitted order copying a delivered one.

        The source order is read, never written.

        Raises:
            OrderForbidden: principal is not a customer or not the owner.
            OrderNotFound: order does not exist.
            InvalidOrderState: source order was not delivered.
            OrderValidationError: quantity missing or not positive.
        """
        ensure_role(principal, Intent.REORDER)
        source = self.get_order_for(principal, order_id, Intent.REORDER)

        if str(source.status) not in REORDERABLE_STATES:
            logger.warning(
                "order.reorder_rejected",
                order_id=str(source.id),
                current_status=source.status,
            )
            raise InvalidOrderState()

        dto = _parse(ReorderDTO, payload)
        order = self._order_repo.create(
            {
                "customer_id": principal.id,
                "description": source.description,
                "quantity": dto.quantity,
                "image_key": source.image_key,
                "original_order_id": source.id,
            }
        )
        logger.info(
            "order.reordered",
            order_id=str(order.id),
            original_order_id=str(source.id),
            quantity=dto.quantity,
        )
        self._publish(OrderReordered(aggregate_id=order.id, original_order_id=source.id))
        return self._reload(order.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, principal: Principal, order_id: str) -> Order:
        """Retrieve a single order the principal may read.

        Raises:
            OrderNotFound: order does not exist.
            OrderForbidden: principal may not read it.
        """
        return self.get_order_for(principal, order_id, Intent.READ)

    def get_order_for(
        self,
        principal: Principal,
        order_id: str,
        intent: Intent,
        message: Optional[str] = None,
    ) -> Order:
        """Load an order and apply the relationship gate for *intent*."""
        order = self._order_repo.get_by_id(str(order_id))
        if order is None:
            raise OrderNotFound()
        ensure_access(principal, order, intent, message)
        return order

    def list_orders(
        self, principal: Principal, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet:
        """Orders visible to the principal, newest first (lazy)."""
        return self._order_repo.visible_to(principal, filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reload(self, order_id: UUID) -> Order:
        order = self._order_repo.get_by_id(str(order_id))
        if order is None:
            raise OrderNotFound()
        return order

    def _publish(self, event: DomainEvent) -> None:
        publish_on_commit(self._event_bus, event)
