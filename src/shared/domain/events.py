"""Domain event primitives shared by the bounded contexts.

Events are immutable facts about something that already happened
(an order was claimed, a message was posted).  They are published after
the producing transaction commits, so subscribers never observe state
that could still roll back.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable)."""

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly payload (UUIDs and datetimes as strings)."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, UUID):
                data[key] = str(value)
            elif isinstance(value, datetime):
                data[key] = value.isoformat()
        return data
