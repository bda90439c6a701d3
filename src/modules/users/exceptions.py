"""User domain exceptions.

Raised by the Service Layer; the API layer translates them into the
error envelope using each exception's ``code`` and ``status_code``.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError


class UserNotFound(DomainError):
    """The authenticated subject has no (alive) profile record."""

    code = "USER_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User profile not found. Please create a profile first."


class UserAlreadyExists(DomainError):
    """A profile with the same subject or email already exists."""

    code = "USER_EXISTS"
    status_code = status.HTTP_409_CONFLICT
    default_message = "A user with this Auth0 ID or email already exists"


class EmailAlreadyExists(DomainError):
    """Profile update collides with another profile's email."""

    code = "EMAIL_EXISTS"
    status_code = status.HTTP_409_CONFLICT
    default_message = "A user with this email already exists"
