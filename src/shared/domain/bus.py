"""Event bus contracts.

Services depend on ``IEventBus`` only; the in-process implementation in
``shared.infrastructure.bus`` is the default, and tests inject a mock.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Reacts to one event type.  Runs after the producing commit."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None:
        """Register *handler* for exact instances of *event_class*."""
        ...
