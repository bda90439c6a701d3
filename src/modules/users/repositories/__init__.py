"""User profile repositories package."""

from modules.users.repositories.django_repository import UserProfileDjangoRepository
from modules.users.repositories.interfaces import IUserProfileRepository

__all__ = ["IUserProfileRepository", "UserProfileDjangoRepository"]
