"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog
from django.db import transaction

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus; handlers run synchronously."""

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(type(event), [])
        logger.debug("event.published", handler_count=len(handlers), **event.to_dict())
        for handler in handlers:
            handler.handle(event)


def publish_on_commit(bus: IEventBus, event: DomainEvent) -> None:
    """Publish *event* once the current transaction commits.

    Outside a transaction the event is published immediately.  A failing
    handler is logged by Django and does not fail the committed request.
    """
    transaction.on_commit(lambda: bus.publish(event), robust=True)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
