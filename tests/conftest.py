from __future__ import annotations

import itertools
from decimal import Decimal
from typing import Callable, Optional

import pytest
from rest_framework.test import APIClient

from modules.core.authentication import Auth0User
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.users.constants import UserRole
from modules.users.models import UserProfile

_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Profiles and authenticated clients
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_profile() -> Callable[..., UserProfile]:
    def _make(role: str = UserRole.CUSTOMER, name: Optional[str] = None) -> UserProfile:
        n = next(_seq)
        return UserProfile.objects.create(
            auth_subject=f"auth0|user-{n}",
            name=name or f"{role.title()} {n}",
            email=f"user{n}@example.com",
            role=role,
        )

    return _make


@pytest.fixture()
def customer(make_profile) -> UserProfile:
    return make_profile(UserRole.CUSTOMER, "Alice Customer")


@pytest.fixture()
def other_customer(make_profile) -> UserProfile:
    return make_profile(UserRole.CUSTOMER, "Bruna Customer")


@pytest.fixture()
def technician(make_profile) -> UserProfile:
    return make_profile(UserRole.TECHNICIAN, "Tom Technician")


@pytest.fixture()
def other_technician(make_profile) -> UserProfile:
    return make_profile(UserRole.TECHNICIAN, "Tina Technician")


def auth0_user(subject: str, role: Optional[str] = None) -> Auth0User:
    payload = {"sub": subject}
    if role is not None:
        payload["role"] = role
    return Auth0User(payload)


@pytest.fixture()
def token_client() -> Callable[..., APIClient]:
    """APIClient carrying an Auth0 identity (subject plus optional role claim)."""

    def _client(subject: str, role: Optional[str] = None) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=auth0_user(subject, role))
        return client

    return _client


@pytest.fixture()
def client_for(token_client) -> Callable[[UserProfile], APIClient]:
    """APIClient authenticated as the given profile's token subject."""

    def _client(profile: UserProfile) -> APIClient:
        return token_client(profile.auth_subject)

    return _client


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_order() -> Callable[..., Order]:
    """Insert an order directly, bypassing the workflow.

    Review fields are filled in consistently with *status* unless given.
    """

    def _make(
        customer: UserProfile,
        status: str = OrderStatus.SUBMITTED,
        technician: Optional[UserProfile] = None,
        **fields,
    ) -> Order:
        fields.setdefault("description", "Pink nails with glitter")
        fields.setdefault("quantity", 2)
        if status == OrderStatus.REJECTED:
            fields.setdefault("feedback", "Not feasible")
        elif status != OrderStatus.SUBMITTED:
            fields.setdefault("price", Decimal("45.00"))
        return Order.objects.create(
            customer=customer, technician=technician, status=status, **fields
        )

    return _make
