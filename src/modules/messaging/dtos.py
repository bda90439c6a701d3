"""Message DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class SendMessageDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message text is required.")
        return v
