"""Order repository interface.

Extends ``IRepository[Order]`` with the Order Store operations the
Lifecycle Engine needs: creation, visibility-filtered listing, and the
conditional updates that resolve concurrent claims and reviews.

Every conditional update returns ``True`` only when it changed the row.
``False`` means the guard did not hold at commit time; callers re-read
the order to report why.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import Order
    from modules.users.principal import Principal


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert a new ``submitted`` order.

        ``data`` must include ``customer_id``, ``description`` and
        ``quantity``; ``image_key`` and ``original_order_id`` are optional.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an alive order with customer and technician loaded."""

    @abstractmethod
    def visible_to(
        self, principal: Principal, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet:
        """Alive orders the principal may read, newest first."""

    @abstractmethod
    def claim(self, order_id: UUID, technician_id: UUID) -> bool:
        """Set the technician only if the order is still unassigned."""

    @abstractmethod
    def apply_review(
        self,
        order_id: UUID,
        status: str,
        technician_id: UUID,
        price: Optional[Decimal] = None,
        feedback: Optional[str] = None,
    ) -> bool:
        """Record the review outcome only if the order is still submitted."""

    @abstractmethod
    def advance(
        self,
        order_id: UUID,
        from_status: str,
        to_status: str,
        technician_id: UUID,
    ) -> bool:
        """Move the status forward only if it is unchanged and still held."""
