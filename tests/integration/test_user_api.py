"""Integration tests for the profile endpoints."""

from __future__ import annotations

import pytest

from modules.users.constants import UserRole
from modules.users.models import UserProfile

pytestmark = pytest.mark.integration

USERS_URL = "/api/v1/users"
ME_URL = "/api/v1/users/me"


class TestCreateProfile:
    def test_role_from_token_claim(self, token_client):
        client = token_client("auth0|tom", UserRole.TECHNICIAN)
        response = client.post(
            USERS_URL, {"name": "Tom", "email": "tom@example.com"}, format="json"
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "technician"
        assert data["auth0_id"] == "auth0|tom"

    def test_role_in_body_is_ignored(self, token_client):
        client = token_client("auth0|eve")
        response = client.post(
            USERS_URL,
            {"name": "Eve", "email": "eve@example.com", "role": "technician"},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["data"]["role"] == "customer"

    def test_unknown_role_claim_defaults_to_customer(self, token_client):
        client = token_client("auth0|zed", "admin")
        response = client.post(
            USERS_URL, {"name": "Zed", "email": "zed@example.com"}, format="json"
        )
        assert response.json()["data"]["role"] == "customer"

    def test_duplicate_subject(self, token_client, customer):
        client = token_client(customer.auth_subject)
        response = client.post(
            USERS_URL, {"name": "Again", "email": "again@example.com"}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "USER_EXISTS"

    def test_duplicate_email(self, token_client, customer):
        client = token_client("auth0|newcomer")
        response = client.post(
            USERS_URL, {"name": "New", "email": customer.email.upper()}, format="json"
        )
        assert response.status_code == 409

    def test_missing_fields(self, token_client):
        response = token_client("auth0|x").post(USERS_URL, {}, format="json")
        assert response.status_code == 400
        assert "email" in response.json()["error"]["details"]


class TestMyProfile:
    def test_get(self, client_for, technician):
        response = client_for(technician).get(ME_URL)
        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(technician.id)

    def test_get_without_profile(self, token_client):
        response = token_client("auth0|ghost").get(ME_URL)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    def test_update_name_and_email(self, client_for, customer):
        response = client_for(customer).put(
            ME_URL, {"name": "Alicia", "email": "alicia@example.com"}, format="json"
        )

        assert response.status_code == 200
        customer.refresh_from_db()
        assert customer.name == "Alicia"
        assert customer.email == "alicia@example.com"

    def test_role_cannot_change(self, client_for, customer):
        client_for(customer).put(ME_URL, {"role": "technician"}, format="json")
        assert UserProfile.objects.get(id=customer.id).role == UserRole.CUSTOMER

    def test_email_taken(self, client_for, customer, other_customer):
        response = client_for(customer).put(
            ME_URL, {"email": other_customer.email}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "EMAIL_EXISTS"
