"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

- ``CreateOrderDTO``: input for order creation.
- ``ReviewOrderDTO``: accept (with price) or reject (with feedback).
- ``AdvanceStatusDTO``: requested forward status.
- ``ReorderDTO``: quantity for the copied order.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import (
    ADVANCE_TARGETS,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    OrderStatus,
    ReviewAction,
)

_PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_DECIMAL_PLACES)
_PRICE_LIMIT = Decimal(10) ** (PRICE_MAX_DIGITS - PRICE_DECIMAL_PLACES)


def _positive_quantity(v: int) -> int:
    if v < 1:
        raise ValueError("Quantity must be at least 1.")
    return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``customer_id`` is never part of the input; the service takes it
    from the principal.
    """

    model_config = ConfigDict(frozen=True)

    description: str
    quantity: int
    image_key: Optional[str] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Description is required.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        return _positive_quantity(v)

    @field_validator("image_key")
    @classmethod
    def blank_key_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ReviewOrderDTO(BaseModel):
    """Immutable DTO for the one-time review decision.

    Validates:
    - ``accept`` requires ``price`` > 0.
    - ``reject`` requires non-empty ``feedback``.
    The field not belonging to the action is dropped, so price and
    feedback never travel together.
    """

    model_config = ConfigDict(frozen=True)

    action: ReviewAction
    price: Optional[Decimal] = None
    feedback: Optional[str] = None

    @field_validator("price")
    @classmethod
    def normalize_price(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        if not v.is_finite() or v >= _PRICE_LIMIT:
            raise ValueError("Price is out of range.")
        return v.quantize(_PRICE_QUANTUM)

    @model_validator(mode="before")
    @classmethod
    def drop_unrelated_field(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("action") == ReviewAction.ACCEPT:
            data.pop("feedback", None)
        elif data.get("action") == ReviewAction.REJECT:
            data.pop("price", None)
        return data

    @model_validator(mode="after")
    def outcome_is_complete(self) -> ReviewOrderDTO:
        if self.action == ReviewAction.ACCEPT:
            if self.price is None or self.price <= 0:
                raise ValueError("Price must be greater than 0 when accepting an order.")
        elif not (self.feedback or "").strip():
            raise ValueError("Feedback is required when rejecting an order.")
        return self

    @property
    def resulting_status(self) -> OrderStatus:
        if self.action == ReviewAction.ACCEPT:
            return OrderStatus.ACCEPTED
        return OrderStatus.REJECTED


class AdvanceStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str

    @field_validator("status")
    @classmethod
    def status_must_be_advance_target(cls, v: str) -> str:
        if v not in ADVANCE_TARGETS:
            allowed = ", ".join(str(s) for s in ADVANCE_TARGETS)
            raise ValueError(f"Status must be one of: {allowed}.")
        return v


class ReorderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        return _positive_quantity(v)
