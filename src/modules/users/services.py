"""User profile service layer (Use Cases).

Profiles are keyed by the identity-provider subject.  Creation takes the
role from the token claim; updates may only touch ``name`` and ``email``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.users.exceptions import EmailAlreadyExists, UserAlreadyExists, UserNotFound
from modules.users.models import UserProfile

if TYPE_CHECKING:
    from modules.users.dtos import CreateProfileDTO, UpdateProfileDTO
    from modules.users.repositories.interfaces import IUserProfileRepository

logger = structlog.get_logger(__name__)


class UserProfileService:
    """Application service for profile use-cases (repository injected)."""

    def __init__(self, repository: IUserProfileRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def create_profile(self, dto: CreateProfileDTO) -> UserProfile:
        """Create the caller's profile.

        Raises:
            UserAlreadyExists: subject or email already registered.
        """
        log = logger.bind(subject=dto.subject, role=dto.role)

        if self._repo.get_by_subject(dto.subject) or self._repo.get_by_email(
            dto.email
        ):
            log.warning("user.duplicate_profile")
            raise UserAlreadyExists()

        profile = self._repo.save(
            UserProfile(
                auth_subject=dto.subject,
                name=dto.name,
                email=dto.email,
                role=dto.role,
            )
        )
        log.info("user.profile_created", user_id=str(profile.id))
        return profile

    def get_profile(self, subject: str) -> UserProfile:
        """Raises ``UserNotFound`` when the subject has no profile."""
        profile = self._repo.get_by_subject(subject)
        if profile is None:
            raise UserNotFound()
        return profile

    @transaction.atomic
    def update_profile(self, subject: str, dto: UpdateProfileDTO) -> UserProfile:
        """Apply a partial update to the caller's profile.

        Raises:
            UserNotFound: no profile for the subject.
            EmailAlreadyExists: the new email belongs to another profile.
        """
        profile = self.get_profile(subject)
        if dto.is_empty:
            return profile

        log = logger.bind(user_id=str(profile.id))

        if dto.email is not None and dto.email.lower() != profile.email.lower():
            existing = self._repo.get_by_email(dto.email)
            if existing and existing.id != profile.id:
                log.warning("user.duplicate_email")
                raise EmailAlreadyExists()
            profile.email = dto.email

        if dto.name is not None:
            profile.name = dto.name

        try:
            profile = self._repo.save(profile)
        except UserAlreadyExists as exc:
            raise EmailAlreadyExists() from exc
        log.info("user.profile_updated")
        return profile
