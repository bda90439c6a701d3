"""Unit tests for OrderService with a mocked repository.

Orders are unsaved model instances; the repository and the event bus
are ``MagicMock`` objects, so these tests check the decision logic and
the order of checks, not persistence.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from uuid6 import uuid7

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO
from modules.orders.events import OrderAssigned, OrderCreated, OrderReviewed
from modules.orders.exceptions import (
    AlreadyAssigned,
    InvalidOrderState,
    InvalidState,
    InvalidTransition,
    OrderForbidden,
    OrderNotFound,
    OrderValidationError,
)
from modules.orders.models import Order
from modules.orders.services import OrderService
from modules.users.constants import UserRole
from modules.users.principal import Principal

pytestmark = pytest.mark.unit


def _order(**fields) -> Order:
    fields.setdefault("customer_id", uuid7())
    fields.setdefault("description", "Pink nails with glitter")
    fields.setdefault("quantity", 2)
    fields.setdefault("status", OrderStatus.SUBMITTED)
    return Order(**fields)


@pytest.fixture()
def alice():
    return Principal(id=uuid7(), role=UserRole.CUSTOMER)


@pytest.fixture()
def tom():
    return Principal(id=uuid7(), role=UserRole.TECHNICIAN)


@pytest.fixture()
def order_repo():
    return MagicMock()


@pytest.fixture()
def event_bus():
    return MagicMock()


@pytest.fixture()
def service(order_repo, event_bus):
    return OrderService(order_repo, event_bus=event_bus)


class TestCreateOrder:
    def test_customer_id_is_forced_to_principal(self, service, order_repo, alice):
        created = _order(customer_id=alice.id)
        order_repo.create.return_value = created
        order_repo.get_by_id.return_value = created

        dto = CreateOrderDTO(description="Pink nails with glitter", quantity=2)
        result = service.create_order(alice, dto)

        assert result is created
        payload = order_repo.create.call_args.args[0]
        assert payload["customer_id"] == alice.id
        assert payload["quantity"] == 2
        assert payload["image_key"] is None

    def test_technician_cannot_create(self, service, order_repo, tom):
        dto = CreateOrderDTO(description="x", quantity=1)
        with pytest.raises(OrderForbidden):
            service.create_order(tom, dto)
        order_repo.create.assert_not_called()

    def test_event_published_after_commit(
        self, service, order_repo, event_bus, alice, django_capture_on_commit_callbacks
    ):
        created = _order(customer_id=alice.id)
        order_repo.create.return_value = created
        order_repo.get_by_id.return_value = created

        with django_capture_on_commit_callbacks(execute=True):
            service.create_order(alice, CreateOrderDTO(description="x", quantity=1))

        event = event_bus.publish.call_args.args[0]
        assert isinstance(event, OrderCreated)
        assert event.aggregate_id == created.id
        assert event.customer_id == alice.id


class TestAssignOrder:
    def test_claims_unassigned_order(self, service, order_repo, event_bus, tom):
        order = _order()
        claimed = _order(id=order.id, technician_id=tom.id)
        order_repo.get_by_id.side_effect = [order, claimed]
        order_repo.claim.return_value = True

        result = service.assign_order(tom, str(order.id))

        order_repo.claim.assert_called_once_with(order.id, tom.id)
        assert result.technician_id == tom.id

    def test_customer_is_rejected_before_lookup(self, service, order_repo, alice):
        with pytest.raises(OrderForbidden) as exc_info:
            service.assign_order(alice, str(uuid7()))
        assert exc_info.value.message == "Only technicians can assign orders"
        order_repo.get_by_id.assert_not_called()

    def test_missing_order(self, service, order_repo, tom):
        order_repo.get_by_id.return_value = None
        with pytest.raises(OrderNotFound):
            service.assign_order(tom, str(uuid7()))

    def test_already_assigned_to_caller(self, service, order_repo, tom):
        order_repo.get_by_id.return_value = _order(technician_id=tom.id)
        with pytest.raises(AlreadyAssigned) as exc_info:
            service.assign_order(tom, str(uuid7()))
        assert exc_info.value.message == "Order is already assigned to you"
        order_repo.claim.assert_not_called()

    def test_already_assigned_to_someone_else(self, service, order_repo, tom):
        order_repo.get_by_id.return_value = _order(technician_id=uuid7())
        with pytest.raises(AlreadyAssigned) as exc_info:
            service.assign_order(tom, str(uuid7()))
        assert (
            exc_info.value.message == "Order is already assigned to another technician"
        )

    def test_lost_race_rereads_winner(self, service, order_repo, event_bus, tom):
        """The guarded update fails; the fresh read names the winner."""
        stale = _order()
        fresh = _order(id=stale.id, technician_id=uuid7())
        order_repo.get_by_id.side_effect = [stale, fresh]
        order_repo.claim.return_value = False

        with pytest.raises(AlreadyAssigned) as exc_info:
            service.assign_order(tom, str(stale.id))

        assert "another technician" in exc_info.value.message
        assert exc_info.value.status_code == 422
        event_bus.publish.assert_not_called()


class TestReviewOrder:
    def test_accept_sets_price_and_technician(self, service, order_repo, tom):
        order = _order()
        order_repo.get_by_id.return_value = order
        order_repo.apply_review.return_value = True

        service.review_order(tom, str(order.id), {"action": "accept", "price": 45})

        order_repo.apply_review.assert_called_once_with(
            order.id,
            status=OrderStatus.ACCEPTED,
            technician_id=tom.id,
            price=Decimal("45.00"),
            feedback=None,
        )

    def test_reject_sets_feedback_only(self, service, order_repo, tom):
        order = _order()
        order_repo.get_by_id.return_value = order
        order_repo.apply_review.return_value = True

        service.review_order(
            tom,
            str(order.id),
            {"action": "reject", "feedback": "Too intricate", "price": 10},
        )

        kwargs = order_repo.apply_review.call_args.kwargs
        assert kwargs["status"] == OrderStatus.REJECTED
        assert kwargs["feedback"] == "Too intricate"
        assert kwargs["price"] is None

    def test_any_technician_may_review(self, service, order_repo, tom):
        order = _order(technician_id=uuid7())
        order_repo.get_by_id.return_value = order
        order_repo.apply_review.return_value = True

        service.review_order(tom, str(order.id), {"action": "accept", "price": "20"})

        assert order_repo.apply_review.call_args.kwargs["technician_id"] == tom.id

    def test_already_reviewed_wins_over_bad_body(self, service, order_repo, tom):
        order_repo.get_by_id.return_value = _order(status=OrderStatus.ACCEPTED)
        with pytest.raises(InvalidState) as exc_info:
            service.review_order(tom, str(uuid7()), {"action": "bogus"})
        assert exc_info.value.message == "Order has already been reviewed"

    @pytest.mark.parametrize(
        "payload",
        [
            {"action": "accept"},
            {"action": "accept", "price": 0},
            {"action": "accept", "price": -5},
            {"action": "reject"},
            {"action": "reject", "feedback": "   "},
            {"action": "approve", "price": 10},
            {},
        ],
    )
    def test_invalid_payload(self, service, order_repo, tom, payload):
        order_repo.get_by_id.return_value = _order()
        with pytest.raises(OrderValidationError):
            service.review_order(tom, str(uuid7()), payload)
        order_repo.apply_review.assert_not_called()

    def test_lost_review_race_is_invalid_state(
        self, service, order_repo, event_bus, tom
    ):
        stale = _order()
        fresh = _order(id=stale.id, status=OrderStatus.REJECTED, technician_id=uuid7())
        order_repo.get_by_id.side_effect = [stale, fresh]
        order_repo.apply_review.return_value = False

        with pytest.raises(InvalidState):
            service.review_order(tom, str(stale.id), {"action": "accept", "price": 30})
        event_bus.publish.assert_not_called()

    def test_event_carries_action(
        self, service, order_repo, event_bus, tom, django_capture_on_commit_callbacks
    ):
        order_repo.get_by_id.return_value = _order()
        order_repo.apply_review.return_value = True

        with django_capture_on_commit_callbacks(execute=True):
            service.review_order(tom, str(uuid7()), {"action": "reject", "feedback": "No"})

        event = event_bus.publish.call_args.args[0]
        assert isinstance(event, OrderReviewed)
        assert event.action == "reject"


class TestUpdateStatus:
    def test_advances_one_step(self, service, order_repo, tom):
        order = _order(status=OrderStatus.ACCEPTED, technician_id=tom.id)
        order_repo.get_by_id.return_value = order
        order_repo.advance.return_value = True

        service.update_status(tom, str(order.id), {"status": "in_production"})

        order_repo.advance.assert_called_once_with(
            order.id, OrderStatus.ACCEPTED, "in_production", tom.id
        )

    def test_skip_is_invalid_transition(self, service, order_repo, tom):
        order_repo.get_by_id.return_value = _order(
            status=OrderStatus.ACCEPTED, technician_id=tom.id
        )
        with pytest.raises(InvalidTransition) as exc_info:
            service.update_status(tom, str(uuid7()), {"status": "shipped"})

        assert exc_info.value.details == {
            "currentStatus": "accepted",
            "requestedStatus": "shipped",
            "allowedStatuses": ["in_production"],
        }
        order_repo.advance.assert_not_called()

    @pytest.mark.parametrize(
        "status", [OrderStatus.SUBMITTED, OrderStatus.REJECTED, OrderStatus.DELIVERED]
    )
    def test_non_advancing_states(self, service, order_repo, tom, status):
        order_repo.get_by_id.return_value = _order(status=status, technician_id=tom.id)
        with pytest.raises(InvalidState) as exc_info:
            service.update_status(tom, str(uuid7()), {"status": "shipped"})
        assert exc_info.value.message == "Cannot update status from current order state"

    def test_unknown_status_is_validation_error(self, service, order_repo, tom):
        order_repo.get_by_id.return_value = _order(
            status=OrderStatus.SHIPPED, technician_id=tom.id
        )
        with pytest.raises(OrderValidationError):
            service.update_status(tom, str(uuid7()), {"status": "accepted"})

    @pytest.mark.parametrize("status", [OrderStatus.SUBMITTED, OrderStatus.DELIVERED])
    def test_bad_body_wins_over_non_advancing_state(
        self, service, order_repo, tom, status
    ):
        order_repo.get_by_id.return_value = _order(status=status, technician_id=tom.id)
        with pytest.raises(OrderValidationError):
            service.update_status(tom, str(uuid7()), {})
        order_repo.advance.assert_not_called()

    def test_unassigned_order_is_forbidden(self, service, order_repo, tom):
        order_repo.get_by_id.return_value = _order(status=OrderStatus.ACCEPTED)
        with pytest.raises(OrderForbidden):
            service.update_status(tom, str(uuid7()), {"status": "in_production"})


class TestReorder:
    def test_copies_design_and_links_source(self, service, order_repo, alice):
        source = _order(
            customer_id=alice.id,
            status=OrderStatus.DELIVERED,
            image_key="uploads/1_nails.png",
            price=Decimal("45.00"),
        )
        order_repo.get_by_id.return_value = source

        service.reorder(alice, str(source.id), {"quantity": 5})

        payload = order_repo.create.call_args.args[0]
        assert payload == {
            "customer_id": alice.id,
            "description": source.description,
            "quantity": 5,
            "image_key": "uploads/1_nails.png",
            "original_order_id": source.id,
        }
        order_repo.save.assert_not_called()

    def test_not_delivered(self, service, order_repo, alice):
        order_repo.get_by_id.return_value = _order(
            customer_id=alice.id, status=OrderStatus.SHIPPED
        )
        with pytest.raises(InvalidOrderState):
            service.reorder(alice, str(uuid7()), {"quantity": 1})

    def test_foreign_order(self, service, order_repo, alice):
        order_repo.get_by_id.return_value = _order(status=OrderStatus.DELIVERED)
        with pytest.raises(OrderForbidden) as exc_info:
            service.reorder(alice, str(uuid7()), {"quantity": 1})
        assert exc_info.value.message == "You can only reorder your own orders"

    def test_quantity_must_be_positive(self, service, order_repo, alice):
        order_repo.get_by_id.return_value = _order(
            customer_id=alice.id, status=OrderStatus.DELIVERED
        )
        with pytest.raises(OrderValidationError):
            service.reorder(alice, str(uuid7()), {"quantity": 0})
        order_repo.create.assert_not_called()


def test_assign_event_published_once(
    service, order_repo, event_bus, tom, django_capture_on_commit_callbacks
):
    order = _order()
    order_repo.get_by_id.return_value = order
    order_repo.claim.return_value = True

    with django_capture_on_commit_callbacks(execute=True):
        service.assign_order(tom, str(order.id))

    assert event_bus.publish.call_count == 1
    assert isinstance(event_bus.publish.call_args.args[0], OrderAssigned)
