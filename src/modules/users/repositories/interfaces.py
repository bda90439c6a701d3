"""User profile repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.users.models import UserProfile


class IUserProfileRepository(IRepository["UserProfile"]):
    """Repository contract for user profiles."""

    @abstractmethod
    def get_by_subject(self, subject: str) -> Optional[UserProfile]:
        """Retrieve the alive profile for an identity-provider subject."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[UserProfile]:
        """Retrieve a profile by email (case-insensitive)."""
