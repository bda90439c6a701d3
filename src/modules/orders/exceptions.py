"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches them and renders the error envelope
from each exception's ``code`` / ``status_code`` / ``details``.
"""

from __future__ import annotations

from typing import Sequence

from rest_framework import status

from modules.core.exceptions import DomainError, Forbidden, ValidationFailed


class OrderNotFound(DomainError):
    """The requested order does not exist or has been soft-deleted."""

    code = "ORDER_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Order not found"


class OrderForbidden(Forbidden):
    """The Access Policy denied the intent."""


class OrderValidationError(ValidationFailed):
    """Order input is missing or out of range."""


class AlreadyAssigned(DomainError):
    """The order already has a technician (claim lost or redundant)."""

    code = "ALREADY_ASSIGNED"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Order is already assigned to another technician"

    @classmethod
    def for_claimant(cls, claimed_by_caller: bool) -> AlreadyAssigned:
        if claimed_by_caller:
            return cls("Order is already assigned to you")
        return cls()


class InvalidState(DomainError):
    """The current status disallows the whole operation class."""

    code = "INVALID_STATE"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Order is not in a valid state for this operation"


class InvalidTransition(DomainError):
    """The current status advances, but not to the requested status."""

    code = "INVALID_TRANSITION"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid status transition"

    def __init__(
        self,
        current_status: str,
        requested_status: str,
        allowed_statuses: Sequence[str],
    ) -> None:
        self.current_status = current_status
        self.requested_status = requested_status
        self.allowed_statuses = list(allowed_statuses)
        super().__init__(
            details={
                "currentStatus": current_status,
                "requestedStatus": requested_status,
                "allowedStatuses": self.allowed_statuses,
            }
        )


class InvalidOrderState(DomainError):
    """Reorder attempted on an order that was not delivered."""

    code = "INVALID_ORDER_STATE"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Only completed (delivered) orders can be reordered"
