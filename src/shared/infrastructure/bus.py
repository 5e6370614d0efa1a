"""In-memory event bus implementation."""

from __future__ import annotations

from functools import partial
from typing import Dict, Iterable, List, Type

from django.db import transaction

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """In-process event bus.

    Handlers run synchronously in the publishing thread, in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            handler.handle(event)

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def publish_on_commit(self, events: Iterable[DomainEvent]) -> None:
        """Defer publication until the surrounding transaction commits.

        Nothing is published when the transaction rolls back.
        """
        pending = list(events)
        if pending:
            transaction.on_commit(partial(self.publish_all, pending))


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
