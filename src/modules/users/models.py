"""User profile model.

A profile is the local record behind an authenticated identity: the
identity provider proves *who* is calling (``auth_subject``), the profile
says *what* they are (``role``).  Roles are assigned once, at profile
creation, from the token's role claim and are never client-editable.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import SoftDeleteModel
from modules.users.constants import DEFAULT_ROLE, UserRole


class UserProfile(SoftDeleteModel):
    auth_subject = models.CharField(max_length=255, unique=True)
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=DEFAULT_ROLE,
    )

    class Meta:
        db_table = "users"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["role"], name="users_role_idx"),
        ]

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    @property
    def is_technician(self) -> bool:
        return self.role == UserRole.TECHNICIAN

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"
