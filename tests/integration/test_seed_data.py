"""The development seed produces a consistent, re-runnable dataset."""

from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command

from modules.messaging.models import Message
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.users.models import UserProfile

pytestmark = pytest.mark.integration


def _seed() -> str:
    out = StringIO()
    call_command("seed_data", stdout=out)
    return out.getvalue()


def test_every_status_seeded():
    output = _seed()

    assert "Seed completed" in output
    assert UserProfile.objects.count() == 4
    for status in OrderStatus.values:
        assert Order.objects.filter(status=status).count() == 3


def test_review_fields_match_status():
    _seed()
    for order in Order.objects.all():
        if order.status == OrderStatus.SUBMITTED:
            assert order.technician_id is None
            assert order.price is None and order.feedback is None
        elif order.status == OrderStatus.REJECTED:
            assert order.feedback and order.price is None
        else:
            assert order.price > 0 and order.feedback is None


def test_assigned_orders_have_threads():
    _seed()
    assigned = Order.objects.filter(technician__isnull=False).count()
    assert Message.objects.count() == assigned * 2


def test_rerun_is_idempotent():
    _seed()
    _seed()
    assert UserProfile.objects.count() == 4
    assert Order.objects.count() == 18
