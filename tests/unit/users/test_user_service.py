"""Unit tests for UserProfileService with a mocked repository."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from modules.users.constants import UserRole
from modules.users.dtos import CreateProfileDTO, UpdateProfileDTO
from modules.users.exceptions import EmailAlreadyExists, UserAlreadyExists, UserNotFound
from modules.users.models import UserProfile
from modules.users.services import UserProfileService

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    repo = MagicMock()
    repo.get_by_subject.return_value = None
    repo.get_by_email.return_value = None
    repo.save.side_effect = lambda profile: profile
    return repo


@pytest.fixture()
def service(repo):
    return UserProfileService(repo)


def _profile(**fields) -> UserProfile:
    fields.setdefault("auth_subject", "auth0|alice")
    fields.setdefault("name", "Alice")
    fields.setdefault("email", "alice@example.com")
    fields.setdefault("role", UserRole.CUSTOMER)
    return UserProfile(**fields)


class TestCreateProfile:
    def test_role_comes_from_dto(self, service):
        dto = CreateProfileDTO(
            subject="auth0|tom", name="Tom", email="tom@example.com", role="technician"
        )
        profile = service.create_profile(dto)
        assert profile.role == UserRole.TECHNICIAN
        assert profile.auth_subject == "auth0|tom"

    def test_duplicate_subject(self, service, repo):
        repo.get_by_subject.return_value = _profile()
        dto = CreateProfileDTO(subject="auth0|alice", name="A", email="a@example.com")
        with pytest.raises(UserAlreadyExists):
            service.create_profile(dto)
        repo.save.assert_not_called()

    def test_duplicate_email(self, service, repo):
        repo.get_by_email.return_value = _profile(auth_subject="auth0|other")
        dto = CreateProfileDTO(
            subject="auth0|new", name="New", email="alice@example.com"
        )
        with pytest.raises(UserAlreadyExists):
            service.create_profile(dto)


class TestCreateProfileDTO:
    @pytest.mark.parametrize("role", [None, "", "admin"])
    def test_unknown_role_defaults_to_customer(self, role):
        dto = CreateProfileDTO(
            subject="auth0|x", name="X", email="x@example.com", role=role
        )
        assert dto.role == UserRole.CUSTOMER

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            CreateProfileDTO(subject="auth0|x", name="X", email="not-an-email")


class TestGetProfile:
    def test_missing(self, service):
        with pytest.raises(UserNotFound):
            service.get_profile("auth0|ghost")


class TestUpdateProfile:
    def test_updates_name_only(self, service, repo):
        profile = _profile()
        repo.get_by_subject.return_value = profile

        result = service.update_profile("auth0|alice", UpdateProfileDTO(name="Alicia"))

        assert result.name == "Alicia"
        assert result.email == "alice@example.com"
        assert result.role == UserRole.CUSTOMER

    def test_empty_update_is_noop(self, service, repo):
        repo.get_by_subject.return_value = _profile()
        service.update_profile("auth0|alice", UpdateProfileDTO())
        repo.save.assert_not_called()

    def test_email_taken_by_other_profile(self, service, repo):
        profile = _profile()
        repo.get_by_subject.return_value = profile
        repo.get_by_email.return_value = _profile(
            auth_subject="auth0|bruna", email="bruna@example.com"
        )
        with pytest.raises(EmailAlreadyExists):
            service.update_profile(
                "auth0|alice", UpdateProfileDTO(email="bruna@example.com")
            )

    def test_save_conflict_maps_to_email_exists(self, service, repo):
        repo.get_by_subject.return_value = _profile()
        repo.save.side_effect = UserAlreadyExists()
        with pytest.raises(EmailAlreadyExists):
            service.update_profile("auth0|alice", UpdateProfileDTO(email="new@example.com"))
