"""Django ORM implementation of the user profile repository.

Follows the Null Object pattern: look-ups return ``None`` instead of
raising; the Service Layer decides how to surface a missing profile.
"""

from __future__ import annotations

from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.users.exceptions import UserAlreadyExists
from modules.users.models import UserProfile
from modules.users.repositories.interfaces import IUserProfileRepository

logger = structlog.get_logger(__name__)


class UserProfileDjangoRepository(IUserProfileRepository):
    """Concrete profile repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[UserProfile]:
        try:
            return UserProfile.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_subject(self, subject: str) -> Optional[UserProfile]:
        return UserProfile.objects.alive().filter(auth_subject=subject).first()

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        return UserProfile.objects.filter(email__iexact=email).first()

    def save(self, entity: UserProfile) -> UserProfile:
        """Persist a profile; unique-constraint races surface as ``UserAlreadyExists``."""
        is_new = entity._state.adding
        try:
            with transaction.atomic():
                entity.save()
        except IntegrityError as exc:
            logger.warning("user.save_conflict", is_new=is_new)
            raise UserAlreadyExists() from exc
        logger.info("user.saved", user_id=str(entity.id), is_new=is_new)
        return entity
