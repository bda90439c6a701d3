"""User profile DTOs for the Service Layer.

Pydantic v2, immutable (``frozen=True``).  The role is resolved from the
token claim before the DTO is built; clients never send it.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from modules.users.constants import UserRole


class CreateProfileDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    name: str
    email: EmailStr
    role: UserRole = UserRole.CUSTOMER

    @field_validator("subject", "name")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("role", mode="before")
    @classmethod
    def unknown_role_defaults_to_customer(cls, v: object) -> object:
        if v not in UserRole.values:
            return UserRole.CUSTOMER
        return v


class UpdateProfileDTO(BaseModel):
    """Partial update; ``None`` fields are left untouched."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.email is None
