"""Principal Resolver.

Turns the authenticated request user into a ``Principal``, the
``(id, role)`` pair every authorization decision is made on.

- Auth0 tokens: the subject is the ``sub`` claim (``Auth0User.sub``).
- Local SimpleJWT tokens: the subject is the Django username.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID

import structlog

from modules.users.constants import UserRole
from modules.users.exceptions import UserNotFound

if TYPE_CHECKING:
    from modules.users.models import UserProfile
    from modules.users.repositories.interfaces import IUserProfileRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated actor of a request."""

    id: UUID
    role: UserRole

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    @property
    def is_technician(self) -> bool:
        return self.role == UserRole.TECHNICIAN

    @classmethod
    def from_profile(cls, profile: UserProfile) -> Principal:
        return cls(id=profile.id, role=UserRole(profile.role))


def subject_of(user: Any) -> str:
    """Return the identity-provider subject for a DRF ``request.user``."""
    sub = getattr(user, "sub", None)
    if sub:
        return sub
    return user.get_username()


def role_claim_of(user: Any) -> Optional[str]:
    """Return the role claim carried by the token, if any."""
    return getattr(user, "role", None) or None


class PrincipalResolver:
    """Looks up the profile behind an authenticated subject."""

    def __init__(self, repository: IUserProfileRepository) -> None:
        self._repo = repository

    def resolve(self, user: Any) -> Principal:
        """Return the caller's ``Principal``.

        Raises:
            UserNotFound: the subject has no profile record.
        """
        subject = subject_of(user)
        profile = self._repo.get_by_subject(subject)
        if profile is None:
            logger.info("principal.profile_missing", subject=subject)
            raise UserNotFound()
        return Principal.from_profile(profile)
